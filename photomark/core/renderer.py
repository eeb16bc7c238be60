"""
Watermark Renderer V1.0
=======================
Composites a text or image watermark onto an RGBA image using PIL/Pillow.

Technical Notes:
- All blending is straight-alpha "source over destination"
- The text shadow and main text are rendered into one off-screen layer and
  committed to the image in a single composite, so a failure never leaves a
  half-drawn watermark behind
- The target image is modified in place; only the watermark's footprint is
  touched
- Fractional values (opacity-scaled alpha, scaled image sizes) are rounded
  half up
"""

import logging
from typing import Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from .errors import FontUnavailable, WatermarkLoadFailed
from .fonts import FontRegistry
from .layout import calculate_position
from .placeholders import MetadataLike, resolve
from .settings import RGBA, TextWatermarkSettings, WatermarkSettings, WatermarkType

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def _scale_alpha(color: RGBA, opacity: float) -> RGBA:
    r, g, b, a = color
    return r, g, b, _round_half_up(a * opacity)


def measure_text(font: ImageFont.FreeTypeFont, text: str) -> Tuple[int, int, int, int]:
    """
    Measure the ink box of rendered text.

    Returns:
        (left, top, width, height), where (left, top) is the offset of the
        ink from the drawing origin.
    """
    temp_img = Image.new("L", (1, 1), 0)
    temp_draw = ImageDraw.Draw(temp_img)
    left, top, right, bottom = temp_draw.textbbox((0, 0), text, font=font)
    return left, top, right - left, bottom - top


class WatermarkRenderer:
    """
    Applies watermarks described by WatermarkSettings to images.

    The renderer holds the font registry for its lifetime; everything else
    is scoped to a single ``apply`` call. One renderer can serve many
    threads as long as each works on its own image.
    """

    def __init__(self, fonts: Optional[FontRegistry] = None):
        """
        Initialize the renderer.

        Args:
            fonts: Font registry to draw text with. If None, the system
                   fonts are probed.
        """
        self.fonts = fonts if fonts is not None else FontRegistry.open()

    def apply(
            self,
            image: Image.Image,
            settings: WatermarkSettings,
            metadata: MetadataLike = None,
            filename: str = ""
    ) -> Image.Image:
        """
        Apply the configured watermark to an image.

        Args:
            image: RGBA image, modified in place. Other modes are converted
                   first, in which case a new image is returned.
            settings: Watermark configuration.
            metadata: Photo metadata for template placeholders.
            filename: Value for the ``{filename}`` placeholder.

        Returns:
            The watermarked image.

        Raises:
            FontUnavailable: No font for the requested family or fallbacks.
            WatermarkLoadFailed: The watermark image cannot be read.
        """
        if not settings.enabled:
            return image

        settings = self._clamp(settings)

        if image.mode != "RGBA":
            logger.debug("Converting %s image to RGBA", image.mode)
            image = image.convert("RGBA")

        logger.info("Applying %s watermark", settings.watermark_type.value)

        if settings.watermark_type == WatermarkType.TEXT:
            if settings.text_settings is None:
                logger.warning("Text watermark enabled but no text settings provided")
                return image
            if not self.fonts:
                logger.warning("No fonts loaded, skipping text watermark")
                return image
            self._apply_text(image, settings, settings.text_settings, metadata, filename)
        else:
            if not settings.image_path:
                logger.warning("Image watermark enabled but no image path provided")
                return image
            self._apply_image(image, settings, settings.image_path)

        return image

    def apply_array(
            self,
            array: np.ndarray,
            settings: WatermarkSettings,
            metadata: MetadataLike = None,
            filename: str = ""
    ) -> np.ndarray:
        """
        Apply the watermark in place to an ``H x W x 4`` uint8 array.

        The array is only written when the watermark was applied
        successfully.
        """
        if array.ndim != 3 or array.shape[2] != 4 or array.dtype != np.uint8:
            raise ValueError(f"Expected an HxWx4 uint8 array, got {array.shape} {array.dtype}")

        if not settings.enabled:
            return array

        result = self.apply(Image.fromarray(array), settings, metadata, filename)
        array[...] = np.asarray(result)
        return array

    @staticmethod
    def _clamp(settings: WatermarkSettings) -> WatermarkSettings:
        clamped = settings.clamped()
        if clamped.scale != settings.scale:
            logger.warning("Watermark scale %s out of range, using %s", settings.scale, clamped.scale)
        if clamped.opacity != settings.opacity:
            logger.warning("Watermark opacity %s out of range, using %s", settings.opacity, clamped.opacity)
        return clamped

    # ===== Text =====

    def _apply_text(
            self,
            image: Image.Image,
            settings: WatermarkSettings,
            text_settings: TextWatermarkSettings,
            metadata: MetadataLike,
            filename: str
    ):
        text = resolve(text_settings.text, metadata, filename)
        if not text.strip():
            return

        handle = self.fonts.lookup(text_settings.font_family)
        if handle is None:
            raise FontUnavailable(text_settings.font_family)

        font = handle.font(text_settings.font_size * settings.scale)
        color = _scale_alpha(text_settings.color, settings.opacity)

        ink_left, ink_top, text_w, text_h = measure_text(font, text)
        x, y = calculate_position(image.size, (text_w, text_h), settings.position)

        # (origin, color) passes, back to front
        passes = []
        if text_settings.shadow:
            shadow_color = _scale_alpha(text_settings.shadow_color, settings.opacity)
            passes.append((
                (x + text_settings.shadow_offset_x, y + text_settings.shadow_offset_y),
                shadow_color
            ))
        passes.append(((x, y), color))

        # Region of the image covered by any pass
        img_w, img_h = image.size
        left = max(0, min(px for (px, _), _ in passes))
        top = max(0, min(py for (_, py), _ in passes))
        right = min(img_w, max(px for (px, _), _ in passes) + text_w)
        bottom = min(img_h, max(py for (_, py), _ in passes) + text_h)
        if right <= left or bottom <= top:
            return

        region = (right - left, bottom - top)
        layer = Image.new("RGBA", region, (0, 0, 0, 0))
        for (px, py), pass_color in passes:
            origin = (px - left - ink_left, py - top - ink_top)
            layer = Image.alpha_composite(
                layer, self._render_text_layer(region, text, font, origin, pass_color)
            )

        if not np.asarray(layer)[..., 3].any():
            return
        image.alpha_composite(layer, dest=(left, top))

    @staticmethod
    def _render_text_layer(
            size: Tuple[int, int],
            text: str,
            font: ImageFont.FreeTypeFont,
            origin: Tuple[int, int],
            color: RGBA
    ) -> Image.Image:
        """
        Render text as a straight-alpha RGBA layer.

        The glyph coverage is drawn into an L mask first; the layer takes
        the exact RGB of ``color`` and an alpha of coverage * color alpha.
        """
        mask = Image.new("L", size, 0)
        ImageDraw.Draw(mask).text(origin, text, font=font, fill=255)

        coverage = np.asarray(mask, dtype=np.uint32)
        alpha = (coverage * color[3] + 127) // 255

        layer = Image.new("RGBA", size, (*color[:3], 0))
        layer.putalpha(Image.fromarray(alpha.astype(np.uint8)))
        return layer

    # ===== Image =====

    def _apply_image(self, image: Image.Image, settings: WatermarkSettings, watermark_path: str):
        watermark = self._load_watermark(watermark_path)

        scaled_w = max(1, _round_half_up(watermark.width * settings.scale))
        scaled_h = max(1, _round_half_up(watermark.height * settings.scale))
        watermark = watermark.resize((scaled_w, scaled_h), Image.Resampling.LANCZOS)

        pixels = np.array(watermark)
        alpha = pixels[..., 3].astype(np.float64) * settings.opacity
        pixels[..., 3] = np.floor(alpha + 0.5).astype(np.uint8)
        if not pixels[..., 3].any():
            return

        x, y = calculate_position(image.size, (scaled_w, scaled_h), settings.position)

        # Clip to the canvas
        visible_w = min(scaled_w, image.width - x)
        visible_h = min(scaled_h, image.height - y)
        if visible_w <= 0 or visible_h <= 0:
            return

        overlay = Image.fromarray(np.ascontiguousarray(pixels[:visible_h, :visible_w]))
        image.alpha_composite(overlay, dest=(x, y))

    @staticmethod
    def _load_watermark(path: str) -> Image.Image:
        try:
            with Image.open(path) as wm:
                return wm.convert("RGBA")
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise WatermarkLoadFailed(path, e) from e


# Convenience function for simple usage
def apply_watermark(
        image: Image.Image,
        settings: WatermarkSettings,
        metadata: MetadataLike = None,
        filename: str = "",
        renderer: Optional[WatermarkRenderer] = None
) -> Image.Image:
    """
    Convenience function to watermark an image.

    Args:
        image: RGBA image, modified in place.
        settings: Watermark configuration.
        metadata: Photo metadata for template placeholders.
        filename: Value for the ``{filename}`` placeholder.
        renderer: Renderer to reuse; a new one (probing system fonts) is
                  created if None.
    """
    if not settings.enabled:
        return image
    renderer = renderer if renderer is not None else WatermarkRenderer()
    return renderer.apply(image, settings, metadata, filename)
