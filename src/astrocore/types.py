"""
Type definitions for astrocore.

This module provides type aliases and protocols shared by the format readers.
"""

from typing import BinaryIO, Dict, Protocol, Tuple, Union
from pathlib import Path
import numpy as np

# Type aliases for common data structures
FilePath = Union[str, Path]
RawHeaderMap = Dict[str, str]
ParameterMap = Dict[str, str]

# (pixel buffer, width, height) as consumed by the statistics engine
PixelData = Tuple[np.ndarray, int, int]


class SeekableStream(Protocol):
    """Protocol for the byte sources the container readers accept."""

    def read(self, size: int = -1) -> bytes: ...
    def seek(self, offset: int, whence: int = 0) -> int: ...
    def tell(self) -> int: ...


Stream = Union[BinaryIO, SeekableStream]
