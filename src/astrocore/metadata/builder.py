"""
Metadata record builder.

Accumulates keyword patches and structural values for one parse and
finalizes them once into an ``AstroMetadata``. The mount, environment and
WCS sections only exist in the finished record if at least one patch
touched them.
"""

import logging
from typing import Any, Dict, List, Optional

from .keywords import FieldPatch, keyword_patch
from .types import (
    AstroMetadata, AttachmentInfo, ColorManagement, Detector, Environment,
    Equipment, Exposure, Filter, Mount, WcsData, XisfMetadata
)

logger = logging.getLogger(__name__)

# Sections created on first write
LAZY_SECTIONS = {
    'mount': Mount,
    'environment': Environment,
    'wcs': WcsData,
}


class MetadataBuilder:
    """Collects the parts of a metadata record during a single parse."""

    def __init__(self) -> None:
        self.equipment = Equipment()
        self.detector = Detector()
        self.filter = Filter()
        self.exposure = Exposure()
        self.xisf: Optional[XisfMetadata] = None
        self.color_management: Optional[ColorManagement] = None
        self.attachments: List[AttachmentInfo] = []
        self.raw_headers: Dict[str, str] = {}
        self._lazy: Dict[str, Any] = {}

    def section(self, name: str) -> Any:
        """Return a record section, creating a lazy one with defaults on first use."""
        if name in LAZY_SECTIONS:
            if name not in self._lazy:
                self._lazy[name] = LAZY_SECTIONS[name]()
            return self._lazy[name]
        return getattr(self, name)

    def has_section(self, name: str) -> bool:
        """Whether a lazy section has been created."""
        return name in self._lazy

    def apply(self, patch: FieldPatch) -> None:
        """Write one patch into its section."""
        setattr(self.section(patch.section), patch.field, patch.value)

    def set(self, section: str, field_name: str, value: Any) -> None:
        """Write a structural value that does not come from the keyword table."""
        self.apply(FieldPatch(section, field_name, value))

    def add_keyword(self, name: str, value: str) -> bool:
        """
        Record a header keyword verbatim and map it if the table knows it.

        Returns:
            True if the keyword was mapped into a typed field
        """
        self.raw_headers[name] = value
        patch = keyword_patch(name, value)
        if patch is None:
            return False
        self.apply(patch)
        return True

    def build(self) -> AstroMetadata:
        """Finalize into a record and derive the session date."""
        metadata = AstroMetadata(
            equipment=self.equipment,
            detector=self.detector,
            filter=self.filter,
            exposure=self.exposure,
            mount=self._lazy.get('mount'),
            environment=self._lazy.get('environment'),
            wcs=self._lazy.get('wcs'),
            xisf=self.xisf,
            color_management=self.color_management,
            attachments=list(self.attachments),
            raw_headers=dict(self.raw_headers),
        )
        metadata.calculate_session_date()
        logger.debug(f"Built metadata with {len(metadata.raw_headers)} raw headers "
                     f"and {len(metadata.attachments)} attachments")
        return metadata
