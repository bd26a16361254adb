"""
XISF envelope reading.

An XISF container opens with the 8-byte signature "XISF0100" followed by
the header length as a little-endian uint32. The XML header follows
immediately; its first bytes may be padding, which the markup scanner
skips.
"""

import struct
import logging
from dataclasses import dataclass

from ...exceptions import InvalidFormatError, TruncatedDataError
from ...types import Stream
from .markup import extract_markup

logger = logging.getLogger(__name__)

XISF_SIGNATURE = b"XISF0100"
ENVELOPE_SIZE = 12


@dataclass(frozen=True)
class Envelope:
    """Signature and declared header length of a container."""
    signature: bytes
    header_size: int

    @property
    def header_end(self) -> int:
        """Absolute offset just past the header block."""
        return ENVELOPE_SIZE + self.header_size


def read_exact(stream: Stream, size: int, what: str = "data") -> bytes:
    """
    Read exactly size bytes from the stream.

    Raises:
        TruncatedDataError: If the stream ends first
    """
    data = stream.read(size)
    if len(data) < size:
        raise TruncatedDataError(
            f"Unexpected end of file reading {what}: expected {size} bytes, got {len(data)}",
            expected=size,
            actual=len(data),
            file_path=getattr(stream, "name", None),
        )
    return data


def read_envelope(stream: Stream) -> Envelope:
    """
    Read and validate the 12-byte envelope at the current stream position.

    Raises:
        InvalidFormatError: If the signature is not XISF0100
        TruncatedDataError: If the stream is shorter than the envelope
    """
    signature = read_exact(stream, len(XISF_SIGNATURE), "signature")
    if signature != XISF_SIGNATURE:
        raise InvalidFormatError(
            f"Invalid XISF signature: {signature!r}",
            file_path=getattr(stream, "name", None),
            error_code="INVALID_SIGNATURE",
        )

    header_size = struct.unpack('<I', read_exact(stream, 4, "header length"))[0]

    logger.debug(f"XISF signature: {signature.decode('ascii')}")
    logger.debug(f"XML header length: {header_size}")

    return Envelope(signature, header_size)


def read_header_block(stream: Stream) -> bytes:
    """
    Read the envelope and the raw header block that follows it.

    On return the stream is positioned at 12 + header_size.
    """
    envelope = read_envelope(stream)
    return read_exact(stream, envelope.header_size, "XML header")


def read_header_text(stream: Stream) -> str:
    """Read the envelope and header and return the recovered markup text."""
    return extract_markup(read_header_block(stream))
