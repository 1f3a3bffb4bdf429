import logging

from PIL import Image

from watermarker.components.image_processing.alpha_blender import apply_opacity
from watermarker.components.image_processing.placement import resolve_placement
from watermarker.utils.data_structures import WatermarkConfig
from watermarker.utils.utils import to_pixel


class WatermarkCompositor:
    RESAMPLING = Image.Resampling.BILINEAR

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def clip_box(base_size, size, position):
        """
        Clip a rectangle of ``size`` placed at ``position`` against the base.

        Returns ``(dest, source_box)`` for Image.alpha_composite, or None when
        nothing of the rectangle is left inside the base image.
        """
        base_w, base_h = base_size
        width, height = size
        x, y = position

        left = max(x, 0)
        top = max(y, 0)
        right = min(x + width, base_w)
        bottom = min(y + height, base_h)
        if right <= left or bottom <= top:
            return None

        source_box = (left - x, top - y, right - x, bottom - y)
        return (left, top), source_box

    def composite(self, base: Image.Image, watermark: Image.Image, config: WatermarkConfig) -> Image.Image:
        """Return a copy of ``base`` with ``watermark`` blended on top."""
        blended = apply_opacity(watermark, config.opacity)
        placement = resolve_placement(base.width, base.height, watermark.width, watermark.height, config)

        target_size = (max(to_pixel(placement.target_width), 1), max(to_pixel(placement.target_height), 1))
        position = (to_pixel(placement.x), to_pixel(placement.y))

        result = base.convert("RGBA")
        clipped = self.clip_box(result.size, target_size, position)
        if clipped is None:
            self.logger.warning(
                f"Watermark at {position} with size {target_size} is outside the "
                f"{result.width}x{result.height} image, nothing to draw"
            )
            return result

        resized = blended.resize(target_size, self.RESAMPLING)
        dest, source_box = clipped
        result.alpha_composite(resized, dest=dest, source=source_box)
        return result
