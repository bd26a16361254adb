"""
FITS file format handler.

Pixels come from astropy; metadata goes through the shared keyword table.
"""

import logging
from typing import List

from ...types import FilePath, PixelData
from ...metadata.fits_parser import extract_metadata_from_path
from ...metadata.types import AstroMetadata
from ..fits_reader import load_fits
from .. import BaseImageFormatHandler

logger = logging.getLogger(__name__)


class FitsFileHandler(BaseImageFormatHandler):
    """Handler for FITS format files."""

    def _get_supported_extensions(self) -> List[str]:
        """FITS file extensions."""
        return ['.fits', '.fit', '.fts']

    def get_format_name(self) -> str:
        """Format name for FITS files."""
        return "FITS"

    def load_pixels(self, file_path: FilePath) -> PixelData:
        logger.debug(f"Reading FITS pixels from {file_path}")
        return load_fits(file_path)

    def extract_metadata(self, file_path: FilePath) -> AstroMetadata:
        return extract_metadata_from_path(file_path)
