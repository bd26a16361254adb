"""
Shared FITS keyword mapping.

Both the FITS reader and the XISF reader (which embeds FITS keywords in its
XML header) map header cards into the metadata record through
``keyword_patch``. A patch names the record section, the field and the
already-converted value; applying it is the builder's job.

Value conversion follows the header conventions of capture software:
numbers are parsed leniently (failure yields ``None``), binning falls back
to 1, coordinates accept decimal or sexagesimal notation and timestamps are
tried against a fixed list of ISO-8601 variants.
"""

import re
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)

# Tried in order, first full match wins
DATE_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%d %H:%M:%S",
)

# strptime's %f accepts at most six digits
_EXCESS_FRACTION = re.compile(r"(\.\d{6})\d+")


class FieldPatch(NamedTuple):
    """A single typed write into one section of the metadata record."""
    section: str
    field: str
    value: Any


def _is_bare_number(value: Any) -> bool:
    # float() and int() also accept padding and '_' digit separators
    return isinstance(value, str) and value == value.strip() and "_" not in value


def parse_float(value: str) -> Optional[float]:
    """Parse a float, returning None for anything unparseable."""
    if not _is_bare_number(value):
        return None
    try:
        return float(value)
    except ValueError:
        return None


def parse_int(value: str) -> Optional[int]:
    """Parse an integer, returning None for anything unparseable."""
    if not _is_bare_number(value):
        return None
    try:
        return int(value)
    except ValueError:
        return None


def parse_bool(value: str) -> bool:
    """Header flag: 'true' (any case), 'T' or '1'."""
    return value.strip().lower() in ("true", "t", "1")


def parse_sexagesimal(value: str) -> Optional[float]:
    """
    Parse "H M S" / "D M S" notation into decimal hours or degrees.

    The sign is taken from the first token or a leading '-' on the string,
    so "-0 30 0" is -0.5.
    """
    parts = value.split()
    if len(parts) < 3:
        return None

    h, m, s = (parse_float(part) for part in parts[:3])
    if h is None or m is None or s is None:
        return None

    sign = -1.0 if h < 0 or value.startswith('-') else 1.0
    return sign * (abs(h) + m / 60.0 + s / 3600.0)


def parse_right_ascension(value: str) -> Optional[float]:
    """Right ascension in degrees; sexagesimal values are hours and scaled by 15."""
    decimal = parse_float(value)
    if decimal is not None:
        return decimal

    hours = parse_sexagesimal(value)
    if hours is None:
        return None
    return hours * 15.0


def parse_declination(value: str) -> Optional[float]:
    """Declination in degrees, decimal or sexagesimal."""
    decimal = parse_float(value)
    if decimal is not None:
        return decimal
    return parse_sexagesimal(value)


def parse_date_time(date_str: str) -> Optional[datetime]:
    """
    Parse a header timestamp as UTC.

    Returns None (and logs a warning) if no known format matches.
    """
    candidate = _EXCESS_FRACTION.sub(r"\1", date_str)

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(candidate, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue

    logger.warning(f"Failed to parse date string: {date_str}")
    return None


def _text(value: str) -> str:
    return value


def _binning(value: str) -> int:
    binning = parse_int(value)
    return 1 if binning is None else binning


def _software(product: str) -> Callable[[str], str]:
    return lambda value: f"{product} {value}"


# keyword -> (section, field, converter)
_KEYWORD_TABLE: Dict[str, Tuple[str, str, Callable[[str], Any]]] = {}


def _register(names: Tuple[str, ...], section: str, field_name: str, converter: Callable[[str], Any]) -> None:
    for name in names:
        _KEYWORD_TABLE[name] = (section, field_name, converter)


# Equipment
_register(("TELESCOP",), "equipment", "telescope_name", _text)
_register(("FOCALLEN",), "equipment", "focal_length", parse_float)
_register(("APERTURE",), "equipment", "aperture", parse_float)
_register(("FOCRATIO",), "equipment", "focal_ratio", parse_float)
_register(("MOUNT",), "equipment", "mount_model", _text)
_register(("FOCPOS", "FOCUSPOS"), "equipment", "focuser_position", parse_int)
_register(("FOCTEMP", "FOCUSTEMP"), "equipment", "focuser_temperature", parse_float)

# Detector
_register(("INSTRUME", "CAMERA"), "detector", "camera_name", _text)
_register(("XPIXSZ", "PIXSIZE"), "detector", "pixel_size", parse_float)
_register(("NAXIS1",), "detector", "width", parse_int)
_register(("NAXIS2",), "detector", "height", parse_int)
_register(("XBINNING",), "detector", "binning_x", _binning)
_register(("YBINNING",), "detector", "binning_y", _binning)
_register(("GAIN", "EGAIN"), "detector", "gain", parse_float)
_register(("RDNOISE",), "detector", "read_noise", parse_float)
_register(("CCD-TEMP", "CCDTEMP"), "detector", "temperature", parse_float)
_register(("SET-TEMP", "CCD-TEMP-SETPOINT"), "detector", "temp_setpoint", parse_float)
_register(("COOL-PWR", "COOLPWR"), "detector", "cooler_power", parse_float)
_register(("COOL-STAT", "COOLSTAT"), "detector", "cooler_status", _text)
_register(("OFFSET", "CCDOFFST"), "detector", "offset", parse_int)
_register(("READOUT", "READOUTM"), "detector", "readout_mode", _text)
_register(("USBLIMIT", "USBTRFC"), "detector", "usb_limit", _text)
_register(("ROTANG", "ROTPA", "ROTATANG"), "detector", "rotator_angle", parse_float)

# Filter
_register(("FILTER",), "filter", "name", _text)
_register(("FILTERID", "FLTPOS"), "filter", "position", parse_int)
_register(("WAVELENG", "WAVELEN"), "filter", "wavelength", parse_float)

# Exposure
_register(("OBJECT",), "exposure", "object_name", _text)
_register(("RA", "OBJCTRA"), "exposure", "ra", parse_right_ascension)
_register(("DEC", "OBJCTDEC"), "exposure", "dec", parse_declination)
_register(("DATE-OBS",), "exposure", "date_obs", parse_date_time)
_register(("EXPTIME", "EXPOSURE"), "exposure", "exposure_time", parse_float)
_register(("IMAGETYP", "FRAME"), "exposure", "frame_type", _text)
_register(("SEQID", "SEQFILE"), "exposure", "sequence_id", _text)
_register(("FRAMENUM", "SEQNUM"), "exposure", "frame_number", parse_int)
_register(("DX", "DITHX"), "exposure", "dither_offset_x", parse_float)
_register(("DY", "DITHY"), "exposure", "dither_offset_y", parse_float)
_register(("PROJECT", "PROJNAME"), "exposure", "project_name", _text)
_register(("SESSIONID", "SESSID"), "exposure", "session_id", _text)

# Mount and observatory site
_register(("PIERSIDE",), "mount", "pier_side", _text)
_register(("MFLIP",), "mount", "meridian_flip", parse_bool)
_register(("SITELAT", "OBSLAT"), "mount", "latitude", parse_float)
_register(("SITELONG", "OBSLONG"), "mount", "longitude", parse_float)
_register(("SITEELEV", "OBSELEV"), "mount", "height", parse_float)
_register(("GUIDECAM",), "mount", "guide_camera", _text)
_register(("GUIDERMS",), "mount", "guide_rms", parse_float)
_register(("GUIDESCALE",), "mount", "guide_scale", parse_float)
_register(("DITHER",), "mount", "dither_enabled", parse_bool)
_register(("PEAKRA", "PEAKRAER"), "mount", "peak_ra_error", parse_float)
_register(("PEAKDEC", "PEAKDCER"), "mount", "peak_dec_error", parse_float)

# Environment
_register(("AMB_TEMP", "AMBTEMP"), "environment", "ambient_temp", parse_float)
_register(("HUMIDITY",), "environment", "humidity", parse_float)
_register(("SQM", "SQMMAG", "SKYQUAL"), "environment", "sqm", parse_float)
_register(("DEWPOWER", "DEWPWR"), "environment", "dew_heater_power", parse_float)
_register(("VOLTAGE", "SYSVOLT"), "environment", "voltage", parse_float)
_register(("CURRENT", "SYSCURR"), "environment", "current", parse_float)
_register(("NINA-VERSION",), "environment", "software_version", _software("NINA"))
_register(("EKOS-VERSION",), "environment", "software_version", _software("EKOS"))

# World coordinate system
_register(("CTYPE1",), "wcs", "ctype1", _text)
_register(("CTYPE2",), "wcs", "ctype2", _text)
_register(("CRPIX1",), "wcs", "crpix1", parse_float)
_register(("CRPIX2",), "wcs", "crpix2", parse_float)
_register(("CRVAL1",), "wcs", "crval1", parse_float)
_register(("CRVAL2",), "wcs", "crval2", parse_float)
_register(("CD1_1",), "wcs", "cd1_1", parse_float)
_register(("CD1_2",), "wcs", "cd1_2", parse_float)
_register(("CD2_1",), "wcs", "cd2_1", parse_float)
_register(("CD2_2",), "wcs", "cd2_2", parse_float)
_register(("CROTA2",), "wcs", "crota2", parse_float)
_register(("AIRMASS",), "wcs", "airmass", parse_float)
_register(("ALT-OBS", "ALTITUDE"), "wcs", "altitude", parse_float)
_register(("AZ-OBS", "AZIMUTH"), "wcs", "azimuth", parse_float)


def keyword_patch(name: str, value: str) -> Optional[FieldPatch]:
    """
    Map one header keyword to a record patch.

    Args:
        name: Keyword name (case-sensitive, as written in the header)
        value: Raw string value with FITS quoting already removed

    Returns:
        The patch, or None if the keyword is not modelled
    """
    entry = _KEYWORD_TABLE.get(name)
    if entry is None:
        return None

    section, field_name, converter = entry
    return FieldPatch(section, field_name, converter(value))


def known_keywords() -> Tuple[str, ...]:
    """All keywords the table maps, in registration order."""
    return tuple(_KEYWORD_TABLE)
