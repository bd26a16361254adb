"""
Test utilities for astrocore.

Provides fixtures that build synthetic XISF containers and FITS files.
"""

import os
import struct
from pathlib import Path
from typing import Any, Callable, Dict

import numpy as np
import pytest

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
XISF_ROOT = '<xisf version="1.0" xmlns="http://www.pixinsight.com/xisf">'

# Header block length used by the fixtures; payloads start right after it
HEADER_SIZE = 2048
PAYLOAD_OFFSET = 12 + HEADER_SIZE


def encode_uint16(values) -> bytes:
    """Little-endian UInt16 payload bytes."""
    return np.asarray(values, dtype='<u2').tobytes()


@pytest.fixture
def make_xisf() -> Callable[..., bytes]:
    """
    Factory for container bytes.

    The XML is NUL-padded to header_size and the payload follows directly,
    so it lives at offset 12 + header_size.
    """
    def _make(xml: str, payload: bytes = b"", header_size: int = HEADER_SIZE,
              signature: bytes = b"XISF0100") -> bytes:
        header = xml.encode('utf-8')
        assert len(header) <= header_size, "header does not fit the block"
        header += b"\x00" * (header_size - len(header))
        return signature + struct.pack('<I', header_size) + header + payload

    return _make


@pytest.fixture
def image_header() -> Callable[..., str]:
    """Factory for a complete XISF header with one image element."""
    def _header(width: int, height: int, payload_size: int, attributes: str = "",
                body: str = "", trailer: str = "") -> str:
        return (
            f'{XML_DECLARATION}\n{XISF_ROOT}\n'
            f'<Image geometry="{width}:{height}:1" sampleFormat="UInt16" colorSpace="Gray" '
            f'location="attachment:{PAYLOAD_OFFSET}:{payload_size}"{attributes}>\n'
            f'{body}</Image>\n{trailer}</xisf>'
        )

    return _header


@pytest.fixture
def sample_keywords() -> str:
    """FITSKeyword elements as written by capture software."""
    return (
        '<FITSKeyword name="OBJECT" value="\'M31\'" comment="Target"/>\n'
        '<FITSKeyword name="EXPTIME" value="300.0" comment="Exposure time"/>\n'
        '<FITSKeyword name="TELESCOP" value="\'Esprit 100\'" comment=""/>\n'
        '<FITSKeyword name="FOCALLEN" value="550.0" comment=""/>\n'
        '<FITSKeyword name="XPIXSZ" value="3.76" comment=""/>\n'
        '<FITSKeyword name="DATE-OBS" value="\'2024-03-10T02:00:00.123\'" comment=""/>\n'
        '<FITSKeyword name="OBJCTRA" value="\'00 42 44.3\'" comment=""/>\n'
        '<FITSKeyword name="OBJCTDEC" value="\'+41 16 09\'" comment=""/>\n'
    )


@pytest.fixture
def xisf_file(tmp_path, make_xisf, image_header, sample_keywords) -> Path:
    """2x2 XISF image holding [0, 32768, 65535, 16384] with keywords."""
    payload = encode_uint16([0, 32768, 65535, 16384])
    xml = image_header(2, 2, len(payload), body=sample_keywords)
    path = tmp_path / "light.xisf"
    path.write_bytes(make_xisf(xml, payload))
    return path


@pytest.fixture
def sample_fits_header() -> Dict[str, Any]:
    """Provide sample FITS header data."""
    return {
        'TELESCOP': 'Test Telescope',
        'INSTRUME': 'Test Camera',
        'OBJECT': 'M31',
        'IMAGETYP': 'LIGHT',
        'EXPTIME': 300.0,
        'DATE-OBS': '2025-11-07T12:00:00.000',
        'CCD-TEMP': -20.0,
        'XBINNING': 2,
        'YBINNING': 2,
        'FILTER': 'Luminance',
        'FOCALLEN': 500.0,
        'APERTURE': 100.0,
        'XPIXSZ': 3.8,
        'SITELONG': -75.0,
    }


@pytest.fixture
def sample_fits_file(tmp_path, sample_fits_header) -> str:
    """Create sample FITS file for testing."""
    from astropy.io import fits

    data = np.arange(12, dtype=np.uint16).reshape(3, 4)

    hdu = fits.PrimaryHDU(data, header=fits.Header(list(sample_fits_header.items())))
    fits_path = os.path.join(tmp_path, "test_image.fits")
    hdu.writeto(fits_path, overwrite=True)

    return fits_path
