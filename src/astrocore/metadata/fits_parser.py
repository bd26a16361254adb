"""
Parser for FITS file headers.

This module extracts metadata from FITS headers read with astropy and
converts it into the AstroMetadata structure through the shared keyword
table.
"""

import logging
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

from astropy.io import fits
from astropy.io.fits.card import Undefined

from ..types import FilePath
from .builder import MetadataBuilder
from .types import AstroMetadata

logger = logging.getLogger(__name__)

# Commentary cards carry no keyword value
COMMENTARY_KEYWORDS = {"COMMENT", "HISTORY", ""}

PLUGIN_PREFIXES = ("NINA-PLUGIN-", "EKOS-PLUGIN-")


def _header_items(header: Union[fits.Header, Mapping[str, Any]]) -> Iterable[Tuple[str, Any]]:
    if isinstance(header, fits.Header):
        for card in header.cards:
            yield card.keyword, card.value
    else:
        yield from header.items()


def _card_to_string(value: Any) -> str:
    """Render a card value the way it reads in the header text."""
    if isinstance(value, bool):
        return "T" if value else "F"
    return str(value).strip()


def extract_metadata(header: Union[fits.Header, Mapping[str, Any]],
                     shape: Optional[Tuple[int, ...]] = None) -> AstroMetadata:
    """
    Extract metadata from a FITS header.

    Args:
        header: Primary HDU header (or any keyword -> value mapping)
        shape: Data shape of the primary HDU, used when NAXIS1/NAXIS2 are absent

    Returns:
        AstroMetadata with raw_headers holding every keyword card as a string
    """
    builder = MetadataBuilder()
    plugins = []

    for keyword, value in _header_items(header):
        if keyword in COMMENTARY_KEYWORDS or value is None or isinstance(value, Undefined):
            continue

        text = _card_to_string(value)
        builder.add_keyword(keyword, text)

        if keyword.startswith(PLUGIN_PREFIXES):
            plugins.append(f"{keyword}: {text}")

    detector = builder.detector
    if (detector.width == 0 or detector.height == 0) and shape is not None and len(shape) >= 2:
        # numpy order is (rows, columns)
        detector.height = shape[-2]
        detector.width = shape[-1]

    equipment = builder.equipment
    if equipment.focal_ratio is None and equipment.focal_length and equipment.aperture:
        equipment.focal_ratio = equipment.focal_length / equipment.aperture

    instrument = builder.raw_headers.get("INSTRUME", "")
    if "reducer" in instrument or "flattener" in instrument:
        equipment.reducer_flattener = instrument

    if plugins:
        builder.set("environment", "plugin_info", ", ".join(plugins))

    return builder.build()


def extract_metadata_from_path(path: FilePath) -> AstroMetadata:
    """Extract metadata from the primary HDU of a FITS file."""
    with fits.open(path, mode='readonly') as hdul:
        primary = hdul[0]
        shape = primary.shape if primary.header.get("NAXIS", 0) >= 2 else None
        metadata = extract_metadata(primary.header, shape=shape)

    logger.info(f"Extracted FITS metadata from {path}")
    return metadata
