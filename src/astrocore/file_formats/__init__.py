"""
Image format handling for astrocore.

This module provides the protocol and base class for format handlers and a
registry that dispatches pixel loading and metadata extraction on the file
extension.
"""

import os
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Protocol

from ..types import FilePath, PixelData
from ..exceptions import UnsupportedFormatError
from ..metadata.types import AstroMetadata


class ImageFormatHandler(Protocol):
    """Protocol for image format handlers."""

    def can_handle(self, file_path: FilePath) -> bool:
        """
        Check if this handler can read the given file.

        Args:
            file_path: Path to the file to check

        Returns:
            True if this handler can read the file
        """
        ...

    def get_supported_extensions(self) -> List[str]:
        """
        Get list of file extensions supported by this handler.

        Returns:
            List of supported file extensions (with dots, e.g., ['.fits', '.fit'])
        """
        ...

    def load_pixels(self, file_path: FilePath) -> PixelData:
        """Decode the primary image as (pixels, width, height)."""
        ...

    def extract_metadata(self, file_path: FilePath) -> AstroMetadata:
        """Build the metadata record for the file."""
        ...

    def get_format_name(self) -> str:
        """
        Get human-readable name of the format handled.

        Returns:
            Format name (e.g., "FITS", "XISF")
        """
        ...


class BaseImageFormatHandler(ABC):
    """Base class for image format handlers with extension matching."""

    def __init__(self):
        self._supported_extensions = self._get_supported_extensions()

    @abstractmethod
    def _get_supported_extensions(self) -> List[str]:
        """Return list of supported file extensions."""
        pass

    @abstractmethod
    def get_format_name(self) -> str:
        """Return human-readable format name."""
        pass

    @abstractmethod
    def load_pixels(self, file_path: FilePath) -> PixelData:
        pass

    @abstractmethod
    def extract_metadata(self, file_path: FilePath) -> AstroMetadata:
        pass

    def can_handle(self, file_path: FilePath) -> bool:
        """Check if this handler supports the file based on extension."""
        _, extension = os.path.splitext(str(file_path))
        return extension.lower() in [ext.lower() for ext in self._supported_extensions]

    def get_supported_extensions(self) -> List[str]:
        """Get list of supported extensions."""
        return self._supported_extensions.copy()


class ImageFormatRegistry:
    """
    Central registry of image format handlers.

    New formats are added by registering a handler; the first handler that
    accepts a file wins.
    """

    def __init__(self):
        self._handlers: List[ImageFormatHandler] = []
        self._register_default_handlers()

    def _register_default_handlers(self):
        """Register the FITS and XISF handlers."""
        # Import handlers here to avoid circular imports
        from .handlers.fits_handler import FitsFileHandler
        from .handlers.xisf_handler import XisfFileHandler

        self.register_handler(FitsFileHandler())
        self.register_handler(XisfFileHandler())

    def register_handler(self, handler: ImageFormatHandler) -> None:
        """
        Register a new image format handler.

        Args:
            handler: Image format handler to register
        """
        self._handlers.append(handler)

    def unregister_handler(self, format_name: str) -> bool:
        """
        Unregister an image format handler by name.

        Args:
            format_name: Name of the format handler to remove

        Returns:
            True if handler was found and removed
        """
        for i, handler in enumerate(self._handlers):
            if handler.get_format_name() == format_name:
                self._handlers.pop(i)
                return True
        return False

    def get_supported_formats(self) -> Dict[str, List[str]]:
        """Map each registered format name to its extensions."""
        return {handler.get_format_name(): handler.get_supported_extensions()
                for handler in self._handlers}

    def find_handler(self, file_path: FilePath) -> Optional[ImageFormatHandler]:
        """Handler that can read the file, or None."""
        for handler in self._handlers:
            if handler.can_handle(file_path):
                return handler
        return None

    def can_process(self, file_path: FilePath) -> bool:
        return self.find_handler(file_path) is not None

    def get_handler(self, file_path: FilePath) -> ImageFormatHandler:
        """
        Handler for a file.

        Raises:
            UnsupportedFormatError: If no handler accepts the file
        """
        handler = self.find_handler(file_path)
        if handler is None:
            _, extension = os.path.splitext(str(file_path))
            raise UnsupportedFormatError(
                f"No handler available for file format: {extension}",
                file_path=str(file_path),
                error_code="UNSUPPORTED_FORMAT"
            )
        return handler

    def load_image(self, file_path: FilePath) -> PixelData:
        """Decode the primary image of a file as (pixels, width, height)."""
        return self.get_handler(file_path).load_pixels(file_path)

    def read_metadata(self, file_path: FilePath) -> AstroMetadata:
        """Build the metadata record of a file."""
        return self.get_handler(file_path).extract_metadata(file_path)

    def list_handlers(self) -> List[str]:
        """Get list of registered handler format names."""
        return [handler.get_format_name() for handler in self._handlers]


# Global instance for convenience
_global_registry: Optional[ImageFormatRegistry] = None


def get_format_registry() -> ImageFormatRegistry:
    """
    Get the global format registry instance.

    Returns:
        Singleton ImageFormatRegistry instance
    """
    global _global_registry
    if _global_registry is None:
        _global_registry = ImageFormatRegistry()
    return _global_registry


def reset_format_registry() -> None:
    """Reset the global registry (mainly for testing)."""
    global _global_registry
    _global_registry = None


def load_image(file_path: FilePath) -> PixelData:
    """Decode the primary image of a FITS or XISF file."""
    return get_format_registry().load_image(file_path)


def read_metadata(file_path: FilePath) -> AstroMetadata:
    """Build the metadata record of a FITS or XISF file."""
    return get_format_registry().read_metadata(file_path)


__all__ = [
    'ImageFormatHandler',
    'BaseImageFormatHandler',
    'ImageFormatRegistry',
    'get_format_registry',
    'reset_format_registry',
    'load_image',
    'read_metadata',
]
