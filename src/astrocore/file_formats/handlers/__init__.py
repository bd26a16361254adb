"""Handler implementations for the supported image formats."""

from .fits_handler import FitsFileHandler
from .xisf_handler import XisfFileHandler

__all__ = ['FitsFileHandler', 'XisfFileHandler']
