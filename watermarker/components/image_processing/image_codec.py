import io
import logging
import os

from PIL import Image, ImageOps, UnidentifiedImageError

from watermarker.utils.data_structures import IMAGE_FORMATS, OutputFormatEnum
from watermarker.utils.errors import InvalidConfigError, InvalidImageFormatError, NotFoundError

logger = logging.getLogger(__name__)


def is_image(path):
    try:
        with Image.open(path) as img:
            return img.format in IMAGE_FORMATS
    except (OSError, UnidentifiedImageError):
        return False


def decode_image(path):
    """
    Load an image file into an RGBA raster.

    Parameters:
    - path: str, path to a PNG, GIF or JPEG file

    The file handle is closed before returning, the returned image owns its pixels.
    """
    if not os.path.isfile(path):
        raise NotFoundError(f"Image not found: {path}")
    try:
        with Image.open(path) as img:
            if img.format not in IMAGE_FORMATS:
                raise InvalidImageFormatError(f"Unsupported image format {img.format}: {path}")
            # Respect camera orientation before measuring the image
            return ImageOps.exif_transpose(img).convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError) as e:
        raise InvalidImageFormatError(f"Not an image file: {path}") from e


def to_gif_palette(image):
    """
    Quantise a raster to an adaptive palette for GIF output.

    GIF has a single on/off transparency, pixels with alpha below 128 are
    mapped to one extra palette entry that is returned as the transparency
    index. Returns (image, None) when nothing is transparent.
    """
    paletted = image.convert("RGB").convert("P", palette=Image.Palette.ADAPTIVE, colors=255)
    if image.mode != "RGBA" or image.getchannel("A").getextrema()[0] >= 128:
        return paletted, None

    index = paletted.getextrema()[1] + 1
    palette = paletted.getpalette()
    palette += [0] * max(0, (index + 1) * 3 - len(palette))
    palette[index * 3:index * 3 + 3] = [0, 0, 0]
    paletted.putpalette(palette)

    mask = image.getchannel("A").point(lambda a: 255 if a < 128 else 0)
    paletted.paste(index, None, mask)
    return paletted, index


def encode_image(image, output_format, quality=100, destination=None):
    """
    Encode a raster as JPEG, PNG or GIF.

    Parameters:
    - image: PIL.Image, the raster to encode
    - output_format: OutputFormatEnum or str ('jpg', 'jpeg', 'png', 'gif')
    - quality: int 0..100, only used for JPEG
    - destination: str or None, None returns the encoded bytes
    """
    try:
        output_format = OutputFormatEnum(output_format)
    except ValueError:
        raise InvalidConfigError(f"Output format is unknown: {output_format}") from None
    if isinstance(quality, bool) or not isinstance(quality, int) or not 0 <= quality <= 100:
        raise InvalidConfigError(f"Quality must be an integer between 0 and 100: {quality}")

    save_kwargs = {}
    if output_format == OutputFormatEnum.JPG:
        image = image.convert("RGB")
        save_kwargs["quality"] = quality
    elif output_format == OutputFormatEnum.GIF:
        image, transparency = to_gif_palette(image)
        if transparency is not None:
            # keep palette indexes as built so the transparency index stays valid
            save_kwargs.update(transparency=transparency, optimize=False)
    elif image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA")

    if destination is None:
        output = io.BytesIO()
        image.save(output, format=output_format.pillow_format, **save_kwargs)
        return output.getvalue()

    image.save(destination, format=output_format.pillow_format, **save_kwargs)
    logger.info(f"Image saved: {destination} ({image.width}x{image.height})")
    return destination
