"""
Type definitions for astronomical metadata.

This module defines the structures used to represent metadata from
astronomical image files, including equipment information, detector
settings, filters, exposure details, and more. The same record is produced
by the FITS and XISF readers.
"""

import math
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

# Plate scale constant, arcsec per radian / 1000 (um over mm)
ARCSEC_PER_MICRON_PER_MM = 206.265


@dataclass
class Equipment:
    """Equipment information."""
    telescope_name: Optional[str] = None
    focal_length: Optional[float] = None          # mm
    aperture: Optional[float] = None              # mm
    focal_ratio: Optional[float] = None
    reducer_flattener: Optional[str] = None
    mount_model: Optional[str] = None
    focuser_position: Optional[int] = None
    focuser_temperature: Optional[float] = None   # degrees C


@dataclass
class Detector:
    """Detector and camera settings."""
    camera_name: Optional[str] = None
    pixel_size: Optional[float] = None            # um
    width: int = 0
    height: int = 0
    binning_x: int = 1
    binning_y: int = 1
    gain: Optional[float] = None
    offset: Optional[int] = None
    readout_mode: Optional[str] = None
    usb_limit: Optional[str] = None
    read_noise: Optional[float] = None
    full_well: Optional[float] = None
    temperature: Optional[float] = None
    temp_setpoint: Optional[float] = None
    cooler_power: Optional[float] = None
    cooler_status: Optional[str] = None
    rotator_angle: Optional[float] = None


@dataclass
class Filter:
    """Filter information."""
    name: Optional[str] = None
    position: Optional[int] = None
    wavelength: Optional[float] = None            # nm


@dataclass
class Exposure:
    """Exposure and timing information."""
    object_name: Optional[str] = None
    ra: Optional[float] = None                    # degrees
    dec: Optional[float] = None                   # degrees
    date_obs: Optional[datetime] = None
    session_date: Optional[datetime] = None
    exposure_time: Optional[float] = None         # seconds
    frame_type: Optional[str] = None
    sequence_id: Optional[str] = None
    frame_number: Optional[int] = None
    dither_offset_x: Optional[float] = None
    dither_offset_y: Optional[float] = None
    project_name: Optional[str] = None
    session_id: Optional[str] = None


@dataclass
class Mount:
    """Mount, site and guiding information."""
    pier_side: Optional[str] = None
    meridian_flip: Optional[bool] = None
    latitude: Optional[float] = None              # + north
    longitude: Optional[float] = None             # + east
    height: Optional[float] = None                # m above sea level
    guide_camera: Optional[str] = None
    guide_rms: Optional[float] = None
    guide_scale: Optional[float] = None
    dither_enabled: Optional[bool] = None
    peak_ra_error: Optional[float] = None         # px
    peak_dec_error: Optional[float] = None        # px


@dataclass
class Environment:
    """Environmental and acquisition software data."""
    ambient_temp: Optional[float] = None
    humidity: Optional[float] = None
    dew_heater_power: Optional[float] = None
    voltage: Optional[float] = None
    current: Optional[float] = None
    software_version: Optional[str] = None
    plugin_info: Optional[str] = None
    sqm: Optional[float] = None                   # mag/arcsec^2


@dataclass
class WcsData:
    """World Coordinate System data."""
    ctype1: Optional[str] = None
    ctype2: Optional[str] = None
    crpix1: Optional[float] = None
    crpix2: Optional[float] = None
    crval1: Optional[float] = None
    crval2: Optional[float] = None
    cd1_1: Optional[float] = None
    cd1_2: Optional[float] = None
    cd2_1: Optional[float] = None
    cd2_2: Optional[float] = None
    crota2: Optional[float] = None
    airmass: Optional[float] = None
    altitude: Optional[float] = None
    azimuth: Optional[float] = None


@dataclass
class XisfMetadata:
    """XISF container information."""
    version: str = "1.0"
    creator: Optional[str] = None
    creation_time: Optional[datetime] = None
    block_alignment: Optional[int] = None


@dataclass
class DisplayFunction:
    """Display (screen transfer) function parameters."""
    function_type: Optional[str] = None
    parameters: Dict[str, float] = field(default_factory=dict)


@dataclass
class ColorManagement:
    """Color management information."""
    color_space: Optional[str] = None
    icc_profile: Optional[bytes] = None
    display_function: Optional[DisplayFunction] = None


@dataclass
class AttachmentInfo:
    """Descriptor of one image attachment in a multi-image container."""
    id: str = ""
    geometry: str = ""
    sample_format: str = "UInt16"
    bits_per_sample: int = 16
    compression: Optional[str] = None
    compression_parameters: Dict[str, str] = field(default_factory=dict)
    checksum_type: Optional[str] = None
    checksum: Optional[str] = None
    resolution_x: Optional[float] = None
    resolution_y: Optional[float] = None
    resolution_unit: Optional[str] = None
    location: Optional[str] = None
    color_space: Optional[str] = None


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, ties away from zero (7.5 -> 8, -7.5 -> -8)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass
class AstroMetadata:
    """Core metadata structure with nested components for astronomical images."""
    equipment: Equipment = field(default_factory=Equipment)
    detector: Detector = field(default_factory=Detector)
    filter: Filter = field(default_factory=Filter)
    exposure: Exposure = field(default_factory=Exposure)
    mount: Optional[Mount] = None
    environment: Optional[Environment] = None
    wcs: Optional[WcsData] = None
    xisf: Optional[XisfMetadata] = None
    color_management: Optional[ColorManagement] = None
    attachments: List[AttachmentInfo] = field(default_factory=list)
    raw_headers: Dict[str, str] = field(default_factory=dict)

    def can_calculate_plate_scale(self) -> bool:
        """Check if we have enough information to calculate plate scale."""
        return self.equipment.focal_length is not None and self.detector.pixel_size is not None

    def plate_scale(self) -> Optional[float]:
        """Plate scale in arcsec/pixel."""
        if not self.can_calculate_plate_scale() or not self.equipment.focal_length:
            return None
        return (self.detector.pixel_size / self.equipment.focal_length) * ARCSEC_PER_MICRON_PER_MM

    def field_of_view(self) -> Optional[Tuple[float, float]]:
        """Field of view (width, height) in arcminutes."""
        plate_scale = self.plate_scale()
        if plate_scale is None:
            return None
        return (
            self.detector.width * plate_scale / 60.0,
            self.detector.height * plate_scale / 60.0,
        )

    def approximate_timezone_from_longitude(self) -> Optional[int]:
        """Approximate UTC offset in whole hours from the site longitude."""
        if self.mount is None or self.mount.longitude is None:
            return None
        return round_half_away_from_zero(self.mount.longitude / 15.0)

    def calculate_session_date(self) -> None:
        """
        Assign the observing-night session date.

        The observation time is shifted by the longitude-derived offset. Times
        before local noon belong to the previous day's session; the session
        date is that day's noon.
        """
        date_obs = self.exposure.date_obs
        if date_obs is None:
            return

        local_time = date_obs
        tz_offset = self.approximate_timezone_from_longitude()
        if tz_offset is not None:
            local_time = date_obs + timedelta(hours=tz_offset)

        noon = local_time.replace(hour=12, minute=0, second=0, microsecond=0)
        if local_time < noon:
            noon -= timedelta(days=1)
        self.exposure.session_date = noon

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dictionary of the record."""
        return _to_plain(self)


def _to_plain(value: Any) -> Any:
    if is_dataclass(value):
        return {f.name: _to_plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, bytes):
        return len(value)
    if isinstance(value, dict):
        return {key: _to_plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_to_plain(item) for item in value]
    return value
