"""
Tests for watermark placement.

Run with: python -m pytest tests/test_layout.py -v
"""

import itertools

import pytest

from photomark.core.layout import calculate_position
from photomark.core.settings import HorizontalAlignment as H
from photomark.core.settings import VerticalAlignment as V
from photomark.core.settings import WatermarkPosition


def test_bottom_right():
    position = WatermarkPosition(H.RIGHT, V.BOTTOM, 50, 50)
    assert calculate_position((1000, 800), (200, 30), position) == (750, 720)


def test_centered():
    position = WatermarkPosition(H.CENTER, V.CENTER, 50, 50)
    assert calculate_position((1000, 800), (300, 100), position) == (350, 350)


def test_top_left_uses_margins():
    position = WatermarkPosition(H.LEFT, V.TOP, 12, 34)
    assert calculate_position((1000, 800), (300, 100), position) == (12, 34)


def test_center_ignores_margins_and_truncates():
    position = WatermarkPosition(H.CENTER, V.CENTER, 999, 999)
    assert calculate_position((101, 51), (10, 10), position) == (45, 20)


def test_mixed_axes():
    assert calculate_position((640, 480), (100, 20), WatermarkPosition(H.LEFT, V.BOTTOM, 8, 16)) == (8, 444)
    assert calculate_position((640, 480), (100, 20), WatermarkPosition(H.RIGHT, V.CENTER, 8, 16)) == (532, 230)


def test_oversized_object_is_clamped_to_origin():
    for h, v in itertools.product(H, V):
        assert calculate_position((100, 100), (400, 300), WatermarkPosition(h, v, 10, 10)) == (
            10 if h == H.LEFT else 0,
            10 if v == V.TOP else 0,
        )


@pytest.mark.parametrize("h, v", list(itertools.product(H, V)))
@pytest.mark.parametrize("image_size, object_size, margins", [
    ((1000, 800), (200, 30), (50, 50)),
    ((10, 10), (200, 300), (0, 0)),
    ((50, 50), (49, 51), (100, 100)),
    ((1, 1), (1, 1), (-5, -5)),
])
def test_position_is_never_negative(h, v, image_size, object_size, margins):
    x, y = calculate_position(image_size, object_size, WatermarkPosition(h, v, *margins))
    assert x >= 0 and y >= 0


@pytest.mark.parametrize("image_w, object_w", [(1000, 300), (1001, 300), (7, 2), (8, 3)])
def test_center_is_integer_division(image_w, object_w):
    x, _ = calculate_position((image_w, 10), (object_w, 1), WatermarkPosition(H.CENTER, V.TOP, 0, 0))
    assert x == (image_w - object_w) // 2
