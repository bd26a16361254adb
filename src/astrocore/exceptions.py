"""
Custom exceptions for astrocore.

Provides a hierarchy of exceptions for the hard failures of image loading.
Recoverable conditions (missing metadata, unparseable dates, short pixel
payloads) are logged and never raised.
"""

from typing import Optional


class AstroCoreError(Exception):
    """Base exception for all astrocore errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, **kwargs):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = kwargs

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class FileProcessingError(AstroCoreError):
    """Raised when an image file cannot be processed."""

    def __init__(self, message: str, file_path: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.file_path = file_path


class InvalidFormatError(FileProcessingError):
    """Raised when a file is not a container of the expected type (bad signature)."""
    pass


class TruncatedDataError(FileProcessingError):
    """Raised when the stream ends before a declared number of bytes could be read."""

    def __init__(self, message: str, expected: int = 0, actual: int = 0, **kwargs):
        kwargs.setdefault("error_code", "SHORT_READ")
        super().__init__(message, **kwargs)
        self.expected = expected
        self.actual = actual


class UnsupportedFormatError(FileProcessingError):
    """Raised when no registered handler supports a file."""
    pass


class ConfigurationError(AstroCoreError):
    """Raised when configuration is invalid or missing."""
    pass
