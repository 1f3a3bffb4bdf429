import numpy as np
from PIL import Image

from watermarker.utils.utils import to_pixel


def clamp_opacity(opacity):
    return min(max(float(opacity), 0.0), 1.0)


def scale_alpha(pixel, factor):
    """Scale the alpha of one RGBA pixel, colour channels are left alone."""
    r, g, b, a = pixel
    if a == 0:
        return pixel
    return r, g, b, to_pixel(a * factor)


def apply_opacity(image, opacity):
    """
    Return a copy of ``image`` with every alpha value multiplied by ``opacity``.

    Same rule as scale_alpha, applied to the whole alpha plane at once.
    Opacity outside [0, 1] is clamped.
    """
    factor = clamp_opacity(opacity)
    pixels = np.array(image.convert("RGBA"), dtype=np.uint8)
    alpha = pixels[..., 3]
    visible = alpha > 0
    scaled = np.floor(alpha.astype(np.float64) * factor + 0.5).astype(np.uint8)
    pixels[..., 3] = np.where(visible, scaled, alpha)
    return Image.fromarray(pixels)
