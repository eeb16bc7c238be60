"""
Font Registry
=============
Maps logical font families (``Arial``, ``Default``) to TrueType fonts found
at well-known, OS-specific locations.

Technical Notes:
- Font files are read into memory once, so no file handle outlives probing
- A registry is immutable after construction and can be shared between
  threads; sized fonts are cached per handle behind a lock
- Lookup falls back from the requested family to ``Arial``, then ``Default``
"""

import logging
import math
import sys
import threading
from io import BytesIO
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from PIL import ImageFont

logger = logging.getLogger(__name__)

FALLBACK_FAMILIES = ("Arial", "Default")

_LINUX_LIBERATION = "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf"
_LINUX_DEJAVU = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"

ProbeTable = Sequence[Tuple[str, Sequence[Union[str, Path]]]]


def system_font_paths(platform: Optional[str] = None) -> List[Tuple[str, List[str]]]:
    """
    Return the ``(family, [paths in preference order])`` probe table.

    Args:
        platform: A ``sys.platform`` value; defaults to the running platform.
    """
    platform = platform or sys.platform

    if platform.startswith("win"):
        return [
            ("Arial", ["C:/Windows/Fonts/arial.ttf", "C:/Windows/Fonts/Arial.ttf"]),
            ("Default", ["C:/Windows/Fonts/calibri.ttf", "C:/Windows/Fonts/tahoma.ttf"]),
        ]
    if platform == "darwin":
        return [
            ("Arial", ["/System/Library/Fonts/Arial.ttf", "/Library/Fonts/Arial.ttf"]),
            ("Default", ["/System/Library/Fonts/Helvetica.ttc", "/System/Library/Fonts/Geneva.ttf"]),
        ]
    if platform.startswith("linux"):
        return [
            ("Arial", [_LINUX_LIBERATION, _LINUX_DEJAVU]),
            ("Default", [_LINUX_DEJAVU, _LINUX_LIBERATION]),
        ]
    return []


class FontHandle:
    """
    A loaded font file for one logical family.

    Sized Pillow fonts are created on demand and cached by size.
    """

    def __init__(self, family: str, path: str, data: bytes):
        self.family = family
        self.path = path
        self._data = data
        self._cached_fonts: Dict[float, ImageFont.FreeTypeFont] = {}
        self._lock = threading.Lock()

    @classmethod
    def load(cls, family: str, path: Union[str, Path]) -> "FontHandle":
        """
        Read and validate a font file.

        Raises:
            OSError: If the file cannot be read or is not a usable font.
        """
        data = Path(path).read_bytes()
        # Pillow raises OSError for anything FreeType cannot open
        ImageFont.truetype(BytesIO(data), 12)
        return cls(family, str(path), data)

    def font(self, size: float) -> ImageFont.FreeTypeFont:
        """
        Get or create the font at the given pixel size.

        Args:
            size: Font size in pixels (fractional sizes are allowed).

        Raises:
            ValueError: If the size is NaN or infinite.
        """
        if not math.isfinite(size):
            raise ValueError(f"Font size must be finite, got {size!r}")
        size = max(float(size), 1.0)
        with self._lock:
            font = self._cached_fonts.get(size)
            if font is None:
                font = ImageFont.truetype(BytesIO(self._data), size)
                self._cached_fonts[size] = font
            return font

    def __repr__(self) -> str:
        return f"FontHandle(family={self.family!r}, path={self.path!r})"


class FontRegistry:
    """
    Logical family name -> FontHandle.

    An empty registry is valid; callers treat it as "text watermarking
    unavailable".
    """

    def __init__(self, fonts: Optional[Mapping[str, FontHandle]] = None):
        self._fonts: Dict[str, FontHandle] = dict(fonts or {})

    @classmethod
    def open(cls, platform: Optional[str] = None) -> "FontRegistry":
        """Probe the well-known font locations of the current platform."""
        registry = cls.from_paths(system_font_paths(platform))
        if not registry:
            logger.warning("No suitable fonts found on system; text watermarks are disabled")
        return registry

    @classmethod
    def from_paths(cls, table: ProbeTable) -> "FontRegistry":
        """
        Build a registry from a probe table.

        For each family the paths are tried in order and the first file that
        loads wins. Families with no loadable file are left out.
        """
        fonts: Dict[str, FontHandle] = {}
        for family, paths in table:
            handle = _first_loadable(family, paths)
            if handle is not None:
                fonts[family] = handle
        return cls(fonts)

    def lookup(self, family: str) -> Optional[FontHandle]:
        """
        Find the font for a family, falling back to Arial and then Default.

        Returns:
            The FontHandle, or None when neither the family nor a fallback
            is loaded.
        """
        for name in (family, *FALLBACK_FAMILIES):
            handle = self._fonts.get(name)
            if handle is not None:
                return handle
        return None

    @property
    def families(self) -> List[str]:
        return list(self._fonts)

    def __contains__(self, family: object) -> bool:
        return family in self._fonts

    def __len__(self) -> int:
        return len(self._fonts)

    def __repr__(self) -> str:
        return f"FontRegistry({self.families!r})"


def _first_loadable(family: str, paths: Iterable[Union[str, Path]]) -> Optional[FontHandle]:
    for path in paths:
        try:
            handle = FontHandle.load(family, path)
        except OSError as e:
            logger.debug("Font %s unavailable at %s: %s", family, path, e)
            continue
        logger.debug("Loaded font %s from %s", family, path)
        return handle
    return None
