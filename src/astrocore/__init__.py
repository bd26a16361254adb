"""
astrocore - Astronomical image container reading.

This package reads astronomical images and their metadata, with features
including:

- Native XISF container parsing (envelope, XML header, UInt16 pixel data)
- FITS pixel and header access through astropy
- A shared metadata record with equipment, exposure, mount and WCS details
- Observing-session dates derived from observation time and site longitude

Main Components:
    file_formats: Format registry, FITS reader and the xisfFile package
    metadata: Metadata record types, keyword mapping and the FITS header parser
    types: Type definitions and protocols
    exceptions: Exception hierarchy for error handling
    config: Configuration management with environment support
"""

__version__ = "0.1.0"

# Import type definitions
from .types import FilePath, RawHeaderMap, PixelData, Stream

# Import exception classes
from .exceptions import (
    AstroCoreError,
    FileProcessingError,
    InvalidFormatError,
    TruncatedDataError,
    UnsupportedFormatError,
    ConfigurationError
)

# Import configuration
from .config import get_config, configure_logging, ConfigManager, AstroCoreConfig, XisfConfig

# Import metadata model
from .metadata import AstroMetadata, MetadataBuilder, keyword_patch

# Import format readers
from .file_formats import get_format_registry, load_image, read_metadata
from .file_formats.fits_reader import load_fits
from .file_formats.xisfFile import load_xisf, extract_metadata as extract_xisf_metadata

# Export main classes and functions
__all__ = [
    # Type definitions
    'FilePath',
    'RawHeaderMap',
    'PixelData',
    'Stream',

    # Exceptions
    'AstroCoreError',
    'FileProcessingError',
    'InvalidFormatError',
    'TruncatedDataError',
    'UnsupportedFormatError',
    'ConfigurationError',

    # Configuration
    'get_config',
    'configure_logging',
    'ConfigManager',
    'AstroCoreConfig',
    'XisfConfig',

    # Metadata
    'AstroMetadata',
    'MetadataBuilder',
    'keyword_patch',

    # Readers
    'get_format_registry',
    'load_image',
    'read_metadata',
    'load_fits',
    'load_xisf',
    'extract_xisf_metadata',

    # Package metadata
    '__version__',
]
