"""
Shared fixtures for the watermark engine tests.

Run with: python -m pytest tests -v
"""

import sys
from pathlib import Path

import numpy as np
import pytest
from PIL import Image, ImageFont

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from photomark.core.fonts import FontRegistry


def create_test_image(width: int = 320, height: int = 240) -> Image.Image:
    """Create an opaque RGBA test image with a gradient."""
    xs = np.linspace(0, 255, width, dtype=np.float64)
    ys = np.linspace(0, 255, height, dtype=np.float64)
    arr = np.zeros((height, width, 4), dtype=np.uint8)
    arr[..., 0] = xs[np.newaxis, :].astype(np.uint8)
    arr[..., 1] = ys[:, np.newaxis].astype(np.uint8)
    arr[..., 2] = 128
    arr[..., 3] = 255
    return Image.fromarray(arr)


def create_solid_image(width: int, height: int, color=(0, 0, 0, 255)) -> Image.Image:
    return Image.new("RGBA", (width, height), color)


@pytest.fixture(scope="session")
def font_file(tmp_path_factory) -> Path:
    """A real TrueType font, taken from Pillow's bundled default font."""
    font = ImageFont.load_default(size=20)
    data = getattr(font, "font_bytes", None)
    if not isinstance(font, ImageFont.FreeTypeFont) or not data:
        pytest.skip("Pillow was built without FreeType support")
    path = tmp_path_factory.mktemp("fonts") / "Aileron-Regular.otf"
    path.write_bytes(data)
    return path


@pytest.fixture
def registry(font_file) -> FontRegistry:
    return FontRegistry.from_paths([("Arial", [font_file])])
