"""
Watermark Layout
================
Places a watermark of a given size on an image of a given size.
"""

from typing import Tuple

from .settings import HorizontalAlignment, VerticalAlignment, WatermarkPosition


def _half(n: int) -> int:
    # Integer halving that truncates toward zero, also for negative n
    return n // 2 if n >= 0 else -(-n // 2)


def calculate_position(
        image_size: Tuple[int, int],
        object_size: Tuple[int, int],
        position: WatermarkPosition
) -> Tuple[int, int]:
    """
    Calculate the top-left corner of the watermark.

    Margins only apply to edge-anchored axes. The result is clamped to
    non-negative coordinates; objects extending past the right or bottom
    edge are left for the compositor to clip.

    Args:
        image_size: (width, height) of the target image.
        object_size: (width, height) of the watermark.
        position: Alignment and margins.

    Returns:
        (x, y) in image pixels.
    """
    img_w, img_h = image_size
    obj_w, obj_h = object_size

    if position.horizontal == HorizontalAlignment.LEFT:
        x = position.margin_x
    elif position.horizontal == HorizontalAlignment.CENTER:
        x = _half(img_w - obj_w)
    else:
        x = img_w - obj_w - position.margin_x

    if position.vertical == VerticalAlignment.TOP:
        y = position.margin_y
    elif position.vertical == VerticalAlignment.CENTER:
        y = _half(img_h - obj_h)
    else:
        y = img_h - obj_h - position.margin_y

    return max(0, x), max(0, y)
