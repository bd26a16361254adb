"""
XISF pixel loading.

Decodes the primary image of an XISF container into a normalized float32
buffer. Only uncompressed little-endian UInt16 samples stored as an
attachment in the same file are decoded; the image is treated as a single
plane of width x height samples.
"""

import os
import logging
from typing import NamedTuple, Optional

import numpy as np

from ...config import XisfConfig, get_config
from ...types import FilePath, PixelData, Stream
from .attachments import IMAGE_TAG
from .envelope import read_exact, read_header_text
from .markup import find_attribute, iter_open_tags
from .xisf_types import DataLocation, Geometry, XISFSampleFormat

logger = logging.getLogger(__name__)

UINT16_MAX = 65535.0


class PixelSource(NamedTuple):
    """Geometry and data location of the payload to decode."""
    width: int
    height: int
    location: DataLocation
    fallback: bool = False


def decode_uint16(data: bytes, width: int, height: int) -> np.ndarray:
    """
    Convert little-endian UInt16 samples to floats in [0, 1].

    Args:
        data: Raw payload bytes
        width: Image width in pixels
        height: Image height in pixels

    Returns:
        1-D float32 array of width * height values. If data holds fewer
        than width * height samples the array is all zeros.
    """
    pixel_count = width * height
    expected_size = pixel_count * XISFSampleFormat.UINT16.size()

    logger.debug(f"Expected data size: {expected_size} bytes, actual: {len(data)} bytes")

    if len(data) < expected_size:
        logger.warning(f"Insufficient pixel data for {width}x{height} image "
                       f"({len(data)} of {expected_size} bytes), using a blank image")
        return np.zeros(pixel_count, dtype=np.float32)

    samples = np.frombuffer(data, dtype=XISFSampleFormat.UINT16.to_numpy_dtype(), count=pixel_count)
    return (samples.astype(np.float32) / np.float32(UINT16_MAX)).astype(np.float32)


def read_payload(stream: Stream, location: DataLocation) -> bytes:
    """
    Read a data block at its absolute offset.

    Raises:
        TruncatedDataError: If the file ends before size bytes were read
    """
    stream.seek(location.offset, os.SEEK_SET)
    return read_exact(stream, location.size, "image data")


def _fallback_source(config: XisfConfig) -> PixelSource:
    return PixelSource(
        config.fallback_width,
        config.fallback_height,
        DataLocation(DataLocation.ATTACHMENT, config.fallback_offset, config.fallback_size),
        fallback=True,
    )


def resolve_pixel_source(text: str, config: Optional[XisfConfig] = None) -> PixelSource:
    """
    Find the primary image's geometry and attachment location.

    Falls back to the configured default geometry and location when either
    is missing or the location is not an attachment.
    """
    config = config or get_config().xisf

    image_tag = iter_open_tags(text, IMAGE_TAG).first()
    scope = image_tag if image_tag is not None else text

    geometry = Geometry.parse(find_attribute(scope, "geometry"))
    location = DataLocation.parse(find_attribute(scope, "location"))

    if geometry is None or location is None or not location.is_attachment:
        logger.warning("Could not determine image geometry and data location from the XISF header, "
                       f"using defaults {config.fallback_width}x{config.fallback_height} "
                       f"at offset {config.fallback_offset}")
        return _fallback_source(config)

    sample_format = find_attribute(scope, "sampleFormat")
    if sample_format is not None and XISFSampleFormat.from_string(sample_format) != XISFSampleFormat.UINT16:
        logger.warning(f"Sample format {sample_format} is not supported, decoding as UInt16")

    if geometry.channel_count > 1:
        logger.debug(f"Image has {geometry.channel_count} channels, decoding the first plane")

    logger.debug(f"Image dimensions: {geometry.width}x{geometry.height}")
    logger.debug(f"Data location: offset={location.offset}, size={location.size}")
    return PixelSource(geometry.width, geometry.height, location)


def load_xisf_stream(stream: Stream, config: Optional[XisfConfig] = None) -> PixelData:
    """
    Decode the primary image of an XISF container positioned at its start.

    Returns:
        (pixels, width, height)

    Raises:
        InvalidFormatError: If the signature is wrong
        TruncatedDataError: If the header or payload is cut short
    """
    text = read_header_text(stream)
    source = resolve_pixel_source(text, config)
    data = read_payload(stream, source.location)
    pixels = decode_uint16(data, source.width, source.height)
    return pixels, source.width, source.height


def load_xisf(path: FilePath, config: Optional[XisfConfig] = None) -> PixelData:
    """Load the primary image of an XISF file as (pixels, width, height)."""
    logger.info(f"Loading XISF file: {path}")
    with open(path, 'rb') as f:
        return load_xisf_stream(f, config)
