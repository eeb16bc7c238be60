"""
Core Module - Pure Watermark Logic
==================================
This module contains no UI dependencies.
Placeholder resolution, font lookup, layout and compositing live here.
"""

from .errors import FontUnavailable, InvalidSettings, WatermarkError, WatermarkLoadFailed
from .fonts import FontHandle, FontRegistry, system_font_paths
from .layout import calculate_position
from .placeholders import PLACEHOLDERS, resolve
from .renderer import WatermarkRenderer, apply_watermark, measure_text
from .settings import (
    FONT_FAMILIES,
    HorizontalAlignment,
    ImageMetadata,
    TextWatermarkSettings,
    VerticalAlignment,
    WatermarkPosition,
    WatermarkSettings,
    WatermarkType,
)

__all__ = [
    "WatermarkRenderer",
    "apply_watermark",
    "measure_text",
    "calculate_position",
    "resolve",
    "PLACEHOLDERS",
    "FontRegistry",
    "FontHandle",
    "system_font_paths",
    "WatermarkSettings",
    "WatermarkPosition",
    "TextWatermarkSettings",
    "WatermarkType",
    "HorizontalAlignment",
    "VerticalAlignment",
    "ImageMetadata",
    "FONT_FAMILIES",
    "WatermarkError",
    "FontUnavailable",
    "WatermarkLoadFailed",
    "InvalidSettings",
]
