"""
XISF data types and enums.

Value types for the colon-separated descriptors found on XISF image
elements (geometry and data location) and the sample format names.
"""

import re
from enum import Enum
from typing import NamedTuple, Optional


class XISFSampleFormat(Enum):
    """Enumeration of XISF sample formats."""

    UINT8 = "UInt8"
    UINT16 = "UInt16"
    UINT32 = "UInt32"
    UINT64 = "UInt64"
    INT16 = "Int16"
    INT32 = "Int32"
    FLOAT32 = "Float32"
    FLOAT64 = "Float64"
    COMPLEX32 = "Complex32"
    COMPLEX64 = "Complex64"

    def size(self) -> int:
        """Return the size in bytes for this sample format."""
        sizes = {
            "UInt8": 1,
            "UInt16": 2,
            "UInt32": 4,
            "UInt64": 8,
            "Int16": 2,
            "Int32": 4,
            "Float32": 4,
            "Float64": 8,
            "Complex32": 8,   # 2 * 4 bytes
            "Complex64": 16,  # 2 * 8 bytes
        }
        return sizes[self.value]

    def to_numpy_dtype(self) -> str:
        """Little-endian NumPy dtype string for binary reading."""
        dtype_map = {
            "UInt8": '<u1',
            "UInt16": '<u2',
            "UInt32": '<u4',
            "UInt64": '<u8',
            "Int16": '<i2',
            "Int32": '<i4',
            "Float32": '<f4',
            "Float64": '<f8',
            "Complex32": '<c8',
            "Complex64": '<c16',
        }
        return dtype_map[self.value]

    @classmethod
    def from_string(cls, value: Optional[str]) -> Optional['XISFSampleFormat']:
        """Sample format for a name, or None if the name is unknown."""
        for format_type in cls:
            if format_type.value == value:
                return format_type
        return None


_UNSIGNED = re.compile(r"[0-9]+")


def _parse_dimension(value: str) -> int:
    """Unsigned decimal field; anything but ASCII digits gives 0."""
    if _UNSIGNED.fullmatch(value) is None:
        return 0
    return int(value)


class Geometry(NamedTuple):
    """Image geometry, written as "width:height:channels"."""
    width: int
    height: int
    channel_count: int = 1

    @classmethod
    def parse(cls, geometry_str: Optional[str]) -> Optional['Geometry']:
        """
        Parse a geometry attribute.

        Needs at least width and height; unparseable numbers count as 0 and
        a missing channel count as 1.
        """
        if geometry_str is None:
            return None

        parts = geometry_str.split(':')
        if len(parts) < 2:
            return None

        channels = _parse_dimension(parts[2]) if len(parts) > 2 else 1
        return cls(_parse_dimension(parts[0]), _parse_dimension(parts[1]), channels)

    @property
    def pixel_count(self) -> int:
        """Pixels in one plane."""
        return self.width * self.height

    def __str__(self) -> str:
        return f"{self.width}:{self.height}:{self.channel_count}"


class DataLocation(NamedTuple):
    """Where a data block lives, written as "kind:offset:size"."""
    kind: str
    offset: int
    size: int

    ATTACHMENT = "attachment"

    @classmethod
    def parse(cls, location_str: Optional[str]) -> Optional['DataLocation']:
        """Parse a location attribute; needs kind, offset and size."""
        if location_str is None:
            return None

        parts = location_str.split(':')
        if len(parts) < 3:
            return None

        return cls(parts[0], _parse_dimension(parts[1]), _parse_dimension(parts[2]))

    @property
    def is_attachment(self) -> bool:
        """Block is stored in this same file at an absolute offset."""
        return self.kind == self.ATTACHMENT

    def __str__(self) -> str:
        return f"{self.kind}:{self.offset}:{self.size}"
