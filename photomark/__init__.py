"""
NightCat PhotoMark Package
==========================
Metadata-aware text and image watermarks for photos.

Modules:
    - core: Settings, placeholder resolution, fonts, layout and compositing

Usage:
    from photomark import WatermarkRenderer, WatermarkSettings, ImageMetadata

    renderer = WatermarkRenderer()
    renderer.apply(image, WatermarkSettings(enabled=True), metadata, "IMG_0001.jpg")
"""

__version__ = "1.0.0"
__author__ = "NightCat"
__app_name__ = "NightCat PhotoMark"

# Core exports
from .core import (
    FONT_FAMILIES,
    PLACEHOLDERS,
    FontHandle,
    FontRegistry,
    FontUnavailable,
    HorizontalAlignment,
    ImageMetadata,
    InvalidSettings,
    TextWatermarkSettings,
    VerticalAlignment,
    WatermarkError,
    WatermarkLoadFailed,
    WatermarkPosition,
    WatermarkRenderer,
    WatermarkSettings,
    WatermarkType,
    apply_watermark,
    calculate_position,
    resolve,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__app_name__",

    # Engine
    "WatermarkRenderer",
    "apply_watermark",
    "calculate_position",
    "resolve",
    "PLACEHOLDERS",

    # Fonts
    "FontRegistry",
    "FontHandle",

    # Settings
    "WatermarkSettings",
    "WatermarkPosition",
    "TextWatermarkSettings",
    "WatermarkType",
    "HorizontalAlignment",
    "VerticalAlignment",
    "ImageMetadata",
    "FONT_FAMILIES",

    # Errors
    "WatermarkError",
    "FontUnavailable",
    "WatermarkLoadFailed",
    "InvalidSettings",
]
