import logging

from watermarker.utils.data_structures import AlignXEnum, AlignYEnum, PlacementResult, WatermarkConfig
from watermarker.utils.errors import InvalidConfigError, InvalidWatermarkError

logger = logging.getLogger(__name__)

# Share of the free space (base - target) left before the watermark
ALIGN_X_FACTORS = {AlignXEnum.LEFT: 0.0, AlignXEnum.CENTER: 0.5, AlignXEnum.RIGHT: 1.0}
ALIGN_Y_FACTORS = {AlignYEnum.TOP: 0.0, AlignYEnum.MIDDLE: 0.5, AlignYEnum.BOTTOM: 1.0}


def _align_factor(enum_cls, factors, value):
    try:
        return factors[enum_cls(value)]
    except ValueError:
        raise InvalidConfigError(f"Unknown alignment: {value!r}") from None


def _resolve_offset(offset, base_length, name):
    if offset.is_auto:
        raise InvalidConfigError(f"{name} cannot be auto")
    return offset.resolve(base_length)


def _size_axes(primary, secondary, base_primary, base_secondary, wm_primary, wm_secondary):
    """Return (primary, secondary) lengths, the secondary follows the aspect ratio when auto."""
    primary_length = wm_primary if primary.is_auto else primary.resolve(base_primary)
    if secondary.is_auto:
        secondary_length = wm_secondary * primary_length / wm_primary
    else:
        secondary_length = secondary.resolve(base_secondary)
    return primary_length, secondary_length


def resolve_placement(base_w, base_h, wm_w, wm_h, config: WatermarkConfig) -> PlacementResult:
    """
    Compute the rectangle the watermark is resized into on the base image.

    Landscape and square watermarks size the width first, portrait ones the
    height. Results are floats, rounding happens when compositing. Offsets
    are not clamped so the rectangle may lie partly or fully outside the base.
    """
    if wm_w <= 0 or wm_h <= 0:
        raise InvalidWatermarkError(f"Watermark has no pixels: {wm_w}x{wm_h}")

    x_factor = _align_factor(AlignXEnum, ALIGN_X_FACTORS, config.align_x)
    y_factor = _align_factor(AlignYEnum, ALIGN_Y_FACTORS, config.align_y)

    offset_x = _resolve_offset(config.offset_x, base_w, "offset_x")
    offset_y = _resolve_offset(config.offset_y, base_h, "offset_y")

    if wm_h <= wm_w:
        target_w, target_h = _size_axes(config.width, config.height, base_w, base_h, wm_w, wm_h)
    else:
        target_h, target_w = _size_axes(config.height, config.width, base_h, base_w, wm_h, wm_w)

    x = (base_w - target_w) * x_factor + offset_x
    y = (base_h - target_h) * y_factor + offset_y

    logger.debug(f"Watermark {wm_w}x{wm_h} placed at ({x}, {y}) size {target_w}x{target_h}")
    return PlacementResult(target_width=target_w, target_height=target_h, x=x, y=y)
