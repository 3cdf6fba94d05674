"""Domain exceptions."""
from __future__ import annotations

from typing import Optional


class ConversionError(Exception):
    """Base exception for failures while converting one source file."""

    def __init__(self, message: str, *, filename: Optional[str] = None, cause: Optional[Exception] = None):
        super().__init__(message)
        self.filename = filename
        self.cause = cause


class DecodeError(ConversionError):
    """Raised when the source bytes are corrupt or in an unrecognized format."""
    pass


class EncodeError(ConversionError):
    """Raised when the codec rejects a parameter set or fails to encode a frame."""
    pass


class UnsupportedModeError(ConversionError):
    """Raised when a processing mode outside the known set is requested."""

    def __init__(self, mode: object):
        super().__init__(f"Unsupported processing mode: {mode!r}")
        self.mode = mode


class ConversionCancelledError(ConversionError):
    """Raised when a conversion observes its cancellation signal."""

    def __init__(self, filename: Optional[str] = None, *, completed_pages: int = 0):
        super().__init__(
            f"Conversion cancelled after {completed_pages} page(s)",
            filename=filename,
        )
        self.completed_pages = completed_pages


__all__ = [
    "ConversionError",
    "DecodeError",
    "EncodeError",
    "UnsupportedModeError",
    "ConversionCancelledError",
]
