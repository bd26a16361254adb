"""
Metadata model and header mapping shared by the FITS and XISF readers.
"""

from .types import (
    AstroMetadata, Equipment, Detector, Filter, Exposure, Mount, Environment,
    WcsData, XisfMetadata, ColorManagement, DisplayFunction, AttachmentInfo
)
from .keywords import (
    FieldPatch, keyword_patch, known_keywords, parse_date_time,
    parse_sexagesimal, parse_right_ascension, parse_declination
)
from .builder import MetadataBuilder

__all__ = [
    'AstroMetadata',
    'Equipment',
    'Detector',
    'Filter',
    'Exposure',
    'Mount',
    'Environment',
    'WcsData',
    'XisfMetadata',
    'ColorManagement',
    'DisplayFunction',
    'AttachmentInfo',
    'FieldPatch',
    'keyword_patch',
    'known_keywords',
    'parse_date_time',
    'parse_sexagesimal',
    'parse_right_ascension',
    'parse_declination',
    'MetadataBuilder',
]
