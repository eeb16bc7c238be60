"""
Watermark Settings
==================
Configuration records for the watermark engine.

The records mirror the JSON the host application exchanges, whose keys are
camelCase (``watermarkType``, ``textSettings``, ``marginX`` ...). Use
``from_dict`` / ``to_dict`` (or the ``*_json`` variants) to convert.
"""

import json
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import InvalidSettings

RGBA = Tuple[int, int, int, int]

DEFAULT_TEXT_TEMPLATE = (
    "© {photographer} - {camera_make} {camera_model} - "
    "{focal_length}mm f/{aperture} {shutter_speed}s ISO{iso}"
)

# Logical font families offered by the host application's font picker
FONT_FAMILIES = ["Arial", "Helvetica", "Times New Roman", "Georgia", "Verdana", "Tahoma"]


class _CaselessEnum(str, Enum):
    """String enum that parses its values case-insensitively."""

    @classmethod
    def parse(cls, value: Any):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        raise InvalidSettings(f"Invalid {cls.__name__} value: {value!r}")


class WatermarkType(_CaselessEnum):
    TEXT = "Text"
    IMAGE = "Image"


class HorizontalAlignment(_CaselessEnum):
    LEFT = "Left"
    CENTER = "Center"
    RIGHT = "Right"


class VerticalAlignment(_CaselessEnum):
    TOP = "Top"
    CENTER = "Center"
    BOTTOM = "Bottom"


def _mapping(raw: Any, name: str) -> Mapping[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise InvalidSettings(f"'{name}' must be an object, got {type(raw).__name__}")
    return raw


def _number(raw: Mapping[str, Any], key: str, default, kind=float):
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidSettings(f"'{key}' must be a number, got {value!r}")
    try:
        finite = math.isfinite(value)
    except OverflowError:
        finite = False
    if not finite:
        raise InvalidSettings(f"'{key}' must be a finite number, got {value!r}")
    return kind(value)


def _flag(raw: Mapping[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key, default)
    if not isinstance(value, bool):
        raise InvalidSettings(f"'{key}' must be a boolean, got {value!r}")
    return value


def _color(value: Any, key: str) -> RGBA:
    if (
            not isinstance(value, (list, tuple))
            or len(value) != 4
            or not all(isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255
                       for c in value)
    ):
        raise InvalidSettings(f"'{key}' must be four integers in 0..255, got {value!r}")
    return tuple(value)


@dataclass
class WatermarkPosition:
    """Anchor of the watermark plus margins from the anchored edges."""
    horizontal: HorizontalAlignment = HorizontalAlignment.RIGHT
    vertical: VerticalAlignment = VerticalAlignment.BOTTOM
    margin_x: int = 50  # pixels from the left/right edge
    margin_y: int = 50  # pixels from the top/bottom edge

    def to_dict(self) -> Dict[str, Any]:
        return {
            "horizontal": self.horizontal.value,
            "vertical": self.vertical.value,
            "marginX": self.margin_x,
            "marginY": self.margin_y,
        }

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Any]]) -> "WatermarkPosition":
        raw = _mapping(raw, "position")
        defaults = cls()
        return cls(
            horizontal=HorizontalAlignment.parse(raw.get("horizontal", defaults.horizontal)),
            vertical=VerticalAlignment.parse(raw.get("vertical", defaults.vertical)),
            margin_x=_number(raw, "marginX", defaults.margin_x, int),
            margin_y=_number(raw, "marginY", defaults.margin_y, int),
        )


@dataclass
class TextWatermarkSettings:
    """Configuration for a text watermark."""
    text: str = DEFAULT_TEXT_TEMPLATE
    font_size: float = 24.0  # pixels, before the global scale
    color: RGBA = (255, 255, 255, 255)
    font_family: str = "Arial"
    bold: bool = False
    italic: bool = False
    shadow: bool = True
    shadow_color: RGBA = (0, 0, 0, 128)
    shadow_offset_x: int = 1
    shadow_offset_y: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "fontSize": self.font_size,
            "color": list(self.color),
            "fontFamily": self.font_family,
            "bold": self.bold,
            "italic": self.italic,
            "shadow": self.shadow,
            "shadowColor": list(self.shadow_color),
            "shadowOffsetX": self.shadow_offset_x,
            "shadowOffsetY": self.shadow_offset_y,
        }

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Any]]) -> "TextWatermarkSettings":
        raw = _mapping(raw, "textSettings")
        defaults = cls()
        text = raw.get("text", defaults.text)
        family = raw.get("fontFamily", defaults.font_family)
        if not isinstance(text, str) or not isinstance(family, str):
            raise InvalidSettings("'text' and 'fontFamily' must be strings")
        return cls(
            text=text,
            font_size=_number(raw, "fontSize", defaults.font_size),
            color=_color(raw.get("color", defaults.color), "color"),
            font_family=family,
            bold=_flag(raw, "bold", defaults.bold),
            italic=_flag(raw, "italic", defaults.italic),
            shadow=_flag(raw, "shadow", defaults.shadow),
            shadow_color=_color(raw.get("shadowColor", defaults.shadow_color), "shadowColor"),
            shadow_offset_x=_number(raw, "shadowOffsetX", defaults.shadow_offset_x, int),
            shadow_offset_y=_number(raw, "shadowOffsetY", defaults.shadow_offset_y, int),
        )


@dataclass
class WatermarkSettings:
    """
    Top-level watermark configuration.

    ``text_settings`` is required when ``watermark_type`` is TEXT and
    ``image_path`` when it is IMAGE. A missing required record is not an
    error: the renderer logs a warning and leaves the image unchanged.
    """

    SCALE_RANGE = (0.1, 2.0)
    OPACITY_RANGE = (0.0, 1.0)

    enabled: bool = False
    watermark_type: WatermarkType = WatermarkType.TEXT
    position: WatermarkPosition = field(default_factory=WatermarkPosition)
    scale: float = 1.0
    opacity: float = 0.8
    text_settings: Optional[TextWatermarkSettings] = field(default_factory=TextWatermarkSettings)
    image_path: Optional[str] = None

    def clamped(self) -> "WatermarkSettings":
        """Return a copy whose scale and opacity lie within their ranges."""
        lo_s, hi_s = self.SCALE_RANGE
        lo_o, hi_o = self.OPACITY_RANGE
        return WatermarkSettings(
            enabled=self.enabled,
            watermark_type=self.watermark_type,
            position=self.position,
            scale=max(lo_s, min(hi_s, self.scale)),
            opacity=max(lo_o, min(hi_o, self.opacity)),
            text_settings=self.text_settings,
            image_path=self.image_path,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "watermarkType": self.watermark_type.value,
            "position": self.position.to_dict(),
            "scale": self.scale,
            "opacity": self.opacity,
            "textSettings": self.text_settings.to_dict() if self.text_settings else None,
            "imagePath": self.image_path,
        }

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Any]]) -> "WatermarkSettings":
        if raw is None:
            return cls()
        raw = _mapping(raw, "settings")
        defaults = cls()

        if "textSettings" in raw:
            text_raw = raw["textSettings"]
            text_settings = (
                TextWatermarkSettings.from_dict(text_raw) if text_raw is not None else None
            )
        else:
            text_settings = defaults.text_settings

        image_path = raw.get("imagePath")
        if image_path is not None and not isinstance(image_path, str):
            raise InvalidSettings(f"'imagePath' must be a string, got {image_path!r}")

        return cls(
            enabled=_flag(raw, "enabled", defaults.enabled),
            watermark_type=WatermarkType.parse(raw.get("watermarkType", defaults.watermark_type)),
            position=WatermarkPosition.from_dict(raw.get("position")),
            scale=_number(raw, "scale", defaults.scale),
            opacity=_number(raw, "opacity", defaults.opacity),
            text_settings=text_settings,
            image_path=image_path,
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> "WatermarkSettings":
        try:
            raw = json.loads(text)
        except ValueError as e:
            raise InvalidSettings(f"Invalid settings JSON: {e}", e)
        return cls.from_dict(raw)


@dataclass
class ImageMetadata:
    """
    Photographic metadata of the image being watermarked.

    ``adjustments["exif"]`` maps EXIF tag names (``Make``, ``FNumber`` ...)
    to JSON scalars.
    """
    adjustments: Dict[str, Any] = field(default_factory=dict)

    @property
    def exif(self) -> Mapping[str, Any]:
        exif = self.adjustments.get("exif")
        return exif if isinstance(exif, Mapping) else {}

    @classmethod
    def from_exif(cls, exif: Mapping[str, Any]) -> "ImageMetadata":
        return cls(adjustments={"exif": dict(exif)})

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Any]]) -> "ImageMetadata":
        raw = _mapping(raw, "metadata")
        return cls(adjustments=dict(_mapping(raw.get("adjustments"), "adjustments")))
