"""
XISF header to metadata mapping.

The header text is mapped in independent passes over the same string:

- every ``<FITSKeyword name="..." value="..."/>`` goes into the raw header
  map and through the keyword table shared with the FITS reader;
- structural attributes of the primary image (geometry, colour space)
  and the ``XISF:CreationTime`` / ``XISF:CreatorApplication`` properties;
- container information (version, block alignment);
- colour management (colour space, ICC profile, display function);
- the attachment catalogue.

Structural attributes are looked up inside the first ``<Image>`` tag when
there is one, so an attachment listed later cannot shadow the primary
image. Headers without image elements fall back to document-wide lookups.
"""

import logging
from typing import Optional

from ...metadata.builder import MetadataBuilder
from ...metadata.keywords import parse_date_time, parse_float, parse_int
from ...metadata.types import AstroMetadata, ColorManagement, DisplayFunction, XisfMetadata
from ...types import FilePath, Stream
from .attachments import IMAGE_TAG, catalog_attachments, parse_parameter_list
from .envelope import read_header_text
from .markup import find_attribute, find_property_value, iter_open_tags, iter_self_closing_elements
from .xisf_types import Geometry

logger = logging.getLogger(__name__)

FITS_KEYWORD_TAG = "<FITSKeyword "
XISF_ROOT_TAG = "<xisf "
ICC_PROFILE_TAG = "<ICCProfile "

CREATION_TIME_PROPERTY = "XISF:CreationTime"
CREATOR_APPLICATION_PROPERTY = "XISF:CreatorApplication"
BLOCK_ALIGNMENT_PROPERTY = "XISF:BlockAlignmentSize"
ICC_PROFILE_PROPERTY = "ICCProfile"


def strip_fits_quotes(value: str) -> str:
    """Remove one layer of FITS single quotes: "'M31'" -> "M31"."""
    if len(value) >= 2 and value.startswith("'") and value.endswith("'"):
        return value[1:-1]
    return value


def _map_fits_keywords(text: str, builder: MetadataBuilder) -> None:
    mapped = 0
    for tag in iter_self_closing_elements(text, FITS_KEYWORD_TAG):
        name = find_attribute(tag, "name")
        value = find_attribute(tag, "value")
        if name is None or value is None:
            continue
        if builder.add_keyword(name, strip_fits_quotes(value)):
            mapped += 1

    logger.debug(f"Mapped {mapped} of {len(builder.raw_headers)} FITS keywords")


def _primary_scope(text: str) -> str:
    """Tag text of the primary image, or the whole document if there is none."""
    image_tag = iter_open_tags(text, IMAGE_TAG).first()
    return image_tag if image_tag is not None else text


def _map_image_attributes(text: str, scope: str, builder: MetadataBuilder) -> None:
    geometry = Geometry.parse(find_attribute(scope, "geometry"))
    if geometry is not None:
        builder.detector.width = geometry.width
        builder.detector.height = geometry.height

    sample_format = find_attribute(scope, "sampleFormat")
    if sample_format is not None and sample_format != "UInt16":
        logger.debug(f"Primary image sample format is {sample_format}")

    creation_time = find_property_value(text, CREATION_TIME_PROPERTY)
    if creation_time is not None and builder.exposure.date_obs is None:
        builder.exposure.date_obs = parse_date_time(creation_time)

    creator = find_property_value(text, CREATOR_APPLICATION_PROPERTY)
    if creator is not None:
        environment = builder.section("environment")
        if environment.software_version is None:
            environment.software_version = creator


def _xisf_version(text: str) -> Optional[str]:
    # The XML declaration carries its own version attribute
    root_tag = iter_open_tags(text, XISF_ROOT_TAG).first()
    if root_tag is None:
        return None
    return find_attribute(root_tag, "version")


def _map_xisf_info(text: str, builder: MetadataBuilder) -> None:
    info = XisfMetadata()

    version = _xisf_version(text)
    if version is not None:
        info.version = version

    info.creator = find_property_value(text, CREATOR_APPLICATION_PROPERTY)

    creation_time = find_property_value(text, CREATION_TIME_PROPERTY)
    if creation_time is not None:
        info.creation_time = parse_date_time(creation_time)

    block_alignment = find_attribute(text, "blockAlignment")
    if block_alignment is None:
        block_alignment = find_property_value(text, BLOCK_ALIGNMENT_PROPERTY)
    if block_alignment is not None:
        info.block_alignment = parse_int(block_alignment)

    builder.xisf = info


def _parse_display_parameters(text: str) -> dict:
    parameters = {}
    for key, value in parse_parameter_list(text).items():
        number = parse_float(value)
        if number is None:
            logger.warning(f"Ignoring non-numeric display parameter {key}={value}")
            continue
        parameters[key] = number
    return parameters


def _map_color_management(text: str, scope: str, builder: MetadataBuilder) -> None:
    color = ColorManagement()
    found = False

    color_space = find_attribute(scope, "colorSpace")
    if color_space is not None:
        color.color_space = color_space
        found = True

    # Profile bytes are not decoded, only their presence is recorded
    if find_property_value(text, ICC_PROFILE_PROPERTY) is not None or ICC_PROFILE_TAG in text:
        color.icc_profile = b""
        found = True

    function_type = find_attribute(scope, "displayFunction")
    if function_type is not None:
        display_function = DisplayFunction(function_type=function_type)
        parameters = find_attribute(scope, "displayParameters")
        if parameters is not None:
            display_function.parameters = _parse_display_parameters(parameters)
        color.display_function = display_function
        found = True

    if found:
        builder.color_management = color


def map_markup(text: str) -> AstroMetadata:
    """
    Build a metadata record from XISF header text.

    Never fails: missing values are simply absent from the record. The XISF
    container section is always present.
    """
    builder = MetadataBuilder()
    scope = _primary_scope(text)

    _map_fits_keywords(text, builder)
    _map_image_attributes(text, scope, builder)
    _map_xisf_info(text, builder)
    _map_color_management(text, scope, builder)

    attachments = catalog_attachments(text)
    if attachments:
        builder.attachments = attachments

    return builder.build()


def extract_metadata(stream: Stream) -> AstroMetadata:
    """
    Extract metadata from an XISF container positioned at its start.

    Raises:
        InvalidFormatError: If the signature is wrong
        TruncatedDataError: If the envelope or header is cut short
    """
    return map_markup(read_header_text(stream))


def extract_metadata_from_path(path: FilePath) -> AstroMetadata:
    """Extract metadata from an XISF file."""
    with open(path, 'rb') as f:
        metadata = extract_metadata(f)

    logger.info(f"Extracted XISF metadata from {path}")
    return metadata
