"""
XISF container support.

Reads the envelope and XML header of XISF files with lightweight text
scanning, maps the header into the shared metadata record and decodes the
primary UInt16 image.
"""

from .xisf_types import XISFSampleFormat, Geometry, DataLocation
from .envelope import Envelope, XISF_SIGNATURE, read_envelope, read_header_block, read_header_text
from .markup import (
    extract_markup, find_attribute, find_property_value,
    iter_open_tags, iter_self_closing_elements
)
from .attachments import catalog_attachments, parse_parameter_list
from .metadata_mapper import map_markup, extract_metadata, extract_metadata_from_path
from .pixel_decoder import decode_uint16, resolve_pixel_source, load_xisf, load_xisf_stream

__all__ = [
    'XISFSampleFormat',
    'Geometry',
    'DataLocation',
    'Envelope',
    'XISF_SIGNATURE',
    'read_envelope',
    'read_header_block',
    'read_header_text',
    'extract_markup',
    'find_attribute',
    'find_property_value',
    'iter_open_tags',
    'iter_self_closing_elements',
    'catalog_attachments',
    'parse_parameter_list',
    'map_markup',
    'extract_metadata',
    'extract_metadata_from_path',
    'decode_uint16',
    'resolve_pixel_source',
    'load_xisf',
    'load_xisf_stream',
]
