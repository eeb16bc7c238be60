"""
Metadata Placeholders
=====================
Rewrites watermark templates such as ``"f/{aperture} ISO{iso}"`` with values
taken from the photo's EXIF record and file name.

Technical Notes:
- The set of placeholders is closed; unknown ``{tokens}`` are left as they are
- Substitution is a single regex pass, so braces inside EXIF values are
  never re-interpreted as placeholders
- A recognised placeholder whose source is missing (or has the wrong JSON
  type) becomes the empty string
"""

import math
import re
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .settings import ImageMetadata

# (placeholder, description) pairs, in the order the host UI lists them
PLACEHOLDERS = [
    ("{photographer}", "Photographer name"),
    ("{camera_make}", "Camera make"),
    ("{camera_model}", "Camera model"),
    ("{lens_model}", "Lens model"),
    ("{aperture}", "Aperture (f-stop)"),
    ("{shutter_speed}", "Shutter speed"),
    ("{iso}", "ISO sensitivity"),
    ("{focal_length}", "Focal length (mm)"),
    ("{date_time}", "Date and time"),
    ("{filename}", "File name"),
]

_TOKEN_RE = re.compile(r"\{([a-z_]+)\}")

MetadataLike = Union[ImageMetadata, Mapping[str, Any], None]


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def format_aperture(f_number: float) -> str:
    return f"{f_number:.1f}"


def format_shutter_speed(seconds: float) -> str:
    """
    Format an exposure time: ``2.5`` -> ``"2.5"``, ``0.004`` -> ``"1/250"``.

    Sub-second times are shown as ``1/N`` with N rounded half away from zero.
    """
    if seconds >= 1.0:
        return f"{seconds:.1f}"
    if seconds <= 0:
        return ""
    reciprocal = 1.0 / seconds
    if not math.isfinite(reciprocal):
        return ""
    return f"1/{math.floor(reciprocal + 0.5)}"


def format_focal_length(millimetres: float) -> str:
    # Python's fixed-point formatting; ties go to the even neighbour
    return f"{millimetres:.0f}"


def _exif_of(metadata: MetadataLike) -> Mapping[str, Any]:
    if metadata is None:
        return {}
    if isinstance(metadata, ImageMetadata):
        return metadata.exif
    adjustments = metadata.get("adjustments")
    if isinstance(adjustments, Mapping):
        exif = adjustments.get("exif")
        return exif if isinstance(exif, Mapping) else {}
    return {}


def _text(tag: str) -> Callable[[Mapping[str, Any]], str]:
    return lambda exif: _as_str(exif.get(tag)) or ""


def _real(tag: str, fmt: Callable[[float], str]) -> Callable[[Mapping[str, Any]], str]:
    def value(exif: Mapping[str, Any]) -> str:
        number = _as_float(exif.get(tag))
        return fmt(number) if number is not None else ""
    return value


def _iso(exif: Mapping[str, Any]) -> str:
    iso = _as_int(exif.get("PhotographicSensitivity"))
    return str(iso) if iso is not None else ""


_RESOLVERS: Dict[str, Callable[[Mapping[str, Any]], str]] = {
    "camera_make": _text("Make"),
    "camera_model": _text("Model"),
    "lens_model": _text("LensModel"),
    "aperture": _real("FNumber", format_aperture),
    "shutter_speed": _real("ExposureTime", format_shutter_speed),
    "iso": _iso,
    "focal_length": _real("FocalLength", format_focal_length),
    "date_time": _text("DateTime"),
    "photographer": _text("Artist"),
}


def resolve(template: str, metadata: MetadataLike, filename: str) -> str:
    """
    Replace the metadata placeholders in a watermark template.

    Args:
        template: Template text, e.g. ``"© {photographer}"``.
        metadata: ImageMetadata, or a mapping with an ``adjustments`` key.
        filename: Value for ``{filename}``.

    Returns:
        The resolved text. Never raises.
    """
    exif = _exif_of(metadata)
    cache: Dict[str, str] = {}

    def substitute(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name == "filename":
            return filename
        resolver = _RESOLVERS.get(name)
        if resolver is None:
            return match.group(0)
        if name not in cache:
            cache[name] = resolver(exif)
        return cache[name]

    return _TOKEN_RE.sub(substitute, template)
