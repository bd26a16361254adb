"""
XISF file format handler.

Reads XISF containers natively; no conversion to FITS is involved.
"""

import logging
from typing import List, Optional

from ...config import XisfConfig
from ...types import FilePath, PixelData
from ...metadata.types import AstroMetadata
from ..xisfFile.metadata_mapper import extract_metadata_from_path
from ..xisfFile.pixel_decoder import load_xisf
from .. import BaseImageFormatHandler

logger = logging.getLogger(__name__)


class XisfFileHandler(BaseImageFormatHandler):
    """Handler for XISF format files."""

    def __init__(self, config: Optional[XisfConfig] = None):
        super().__init__()
        self.config = config

    def _get_supported_extensions(self) -> List[str]:
        """XISF file extensions."""
        return ['.xisf']

    def get_format_name(self) -> str:
        """Format name for XISF files."""
        return "XISF"

    def load_pixels(self, file_path: FilePath) -> PixelData:
        """Decode the primary image, using the configured fallback location if needed."""
        return load_xisf(file_path, self.config)

    def extract_metadata(self, file_path: FilePath) -> AstroMetadata:
        return extract_metadata_from_path(file_path)
