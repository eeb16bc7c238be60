"""
Watermark Errors
================
Exception types raised by the watermark engine.

Hierarchy:
- WatermarkError
  - FontUnavailable: no font (requested family or fallback) is loaded
  - WatermarkLoadFailed: the watermark image cannot be opened or decoded
  - InvalidSettings: a settings record is structurally malformed
"""

from typing import Optional


class WatermarkError(Exception):
    """
    Base class for all watermark engine errors.

    Attributes:
        message: Human-readable description of the error.
        original_error: The wrapped exception, if any.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class FontUnavailable(WatermarkError):
    """Raised when a text watermark is requested but no usable font is loaded."""

    def __init__(self, family: str):
        super().__init__(f"No font available for family '{family}' (or its fallbacks)")
        self.family = family


class WatermarkLoadFailed(WatermarkError):
    """Raised when the watermark image file cannot be opened or decoded."""

    def __init__(self, path: str, original_error: Optional[Exception] = None):
        detail = f": {original_error}" if original_error is not None else ""
        super().__init__(f"Cannot load watermark image '{path}'{detail}", original_error)
        self.path = path


class InvalidSettings(WatermarkError):
    """Raised when a settings record cannot be parsed."""
