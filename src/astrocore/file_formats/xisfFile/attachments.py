"""
Attachment cataloguing for XISF headers.

Every ``<Image ...>`` opening tag becomes one AttachmentInfo built only from
that tag's own attribute text.
"""

import logging
from typing import List

from ...metadata.types import AttachmentInfo
from ...types import ParameterMap
from .markup import find_attribute, iter_open_tags

logger = logging.getLogger(__name__)

IMAGE_TAG = "<Image "


def parse_parameter_list(text: str) -> ParameterMap:
    """
    Parse "key=value;key=value" into an ordered mapping.

    Each entry is split at its first '='; entries without one are dropped.
    """
    parameters = {}
    for entry in text.split(';'):
        key, separator, value = entry.partition('=')
        if separator:
            parameters[key] = value
    return parameters


def _parse_optional_float(value):
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _attachment_from_tag(tag: str, index: int) -> AttachmentInfo:
    attachment = AttachmentInfo(id=find_attribute(tag, "id") or f"image{index}")

    attachment.geometry = find_attribute(tag, "geometry") or ""
    attachment.sample_format = find_attribute(tag, "sampleFormat") or "UInt16"

    bits = find_attribute(tag, "bitsPerSample")
    if bits is not None:
        try:
            attachment.bits_per_sample = int(bits)
        except ValueError:
            attachment.bits_per_sample = 16

    compression = find_attribute(tag, "compression")
    if compression is not None:
        attachment.compression = compression
        parameters = find_attribute(tag, "compressionParameters")
        if parameters is not None:
            attachment.compression_parameters = parse_parameter_list(parameters)

    checksum_type = find_attribute(tag, "checksumType")
    if checksum_type is not None:
        attachment.checksum_type = checksum_type
        attachment.checksum = find_attribute(tag, "checksum")

    resolution_x = find_attribute(tag, "xResolution")
    if resolution_x is not None:
        attachment.resolution_x = _parse_optional_float(resolution_x)
        attachment.resolution_y = _parse_optional_float(find_attribute(tag, "yResolution"))
        attachment.resolution_unit = find_attribute(tag, "resolutionUnit")

    attachment.location = find_attribute(tag, "location")
    attachment.color_space = find_attribute(tag, "colorSpace")
    return attachment


def catalog_attachments(text: str) -> List[AttachmentInfo]:
    """
    Describe every image element in the header text, in document order.

    Args:
        text: Header markup text

    Returns:
        One descriptor per ``<Image>`` tag; empty if there are none
    """
    attachments = []
    for tag in iter_open_tags(text, IMAGE_TAG):
        attachments.append(_attachment_from_tag(tag, len(attachments)))

    logger.debug(f"Found {len(attachments)} image attachments")
    return attachments
