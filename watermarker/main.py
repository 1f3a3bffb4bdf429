from __future__ import annotations

import argparse
import logging
import sys

from watermarker.components.watermark import Watermark
from watermarker.utils.data_structures import AlignXEnum, AlignYEnum, OPTION_KEYS
from watermarker.utils.errors import WatermarkError
from watermarker.utils.json_handler import apply_options, load_options

logging.basicConfig(level=logging.INFO, format='%(levelname)s:%(message)s')
logger = logging.getLogger(__name__)


def arg_parser(argv=None):
    parser = argparse.ArgumentParser(description='Add a watermark to an image.')
    parser.add_argument('original_image', help='Path to the image to watermark')
    parser.add_argument('watermark_image', help='Path to the watermark image')
    parser.add_argument('--config', help='JSON file with watermark options')
    parser.add_argument('--opacity', type=float, help='Watermark opacity (0.0-1.0)')
    parser.add_argument('--width', help="Watermark width in pixels (300) or percent ('33%%')")
    parser.add_argument('--height', help="Watermark height in pixels (300) or percent ('33%%')")
    parser.add_argument('--align-x', dest='align_x', choices=[a.value for a in AlignXEnum])
    parser.add_argument('--align-y', dest='align_y', choices=[a.value for a in AlignYEnum])
    parser.add_argument('--offset-x', dest='offset_x', help="Horizontal offset, pixels or percent")
    parser.add_argument('--offset-y', dest='offset_y', help="Vertical offset, pixels or percent")
    parser.add_argument('--format', dest='output_format', help='Output format: jpg, png or gif')
    parser.add_argument('--quality', type=int, help='Output quality 0-100 (JPEG only)')
    parser.add_argument('--destination-path', dest='destination_path', help='Output folder path')
    parser.add_argument('--destination-filename', dest='destination_filename', help='Output file name without extension')
    parser.add_argument('--backup-path', dest='backup_path', help='Folder to copy the original image into')
    parser.add_argument('--debug', action='store_true', default=None, help='Log configuration errors')
    parser.add_argument('--show', action='store_true', help='Write the encoded image to stdout instead of a file')
    return parser.parse_args(argv)


def build_watermark(args) -> Watermark:
    watermark = Watermark().set_original(args.original_image).set_watermark(args.watermark_image)
    if args.config:
        apply_options(watermark, load_options(args.config))
    cli_options = {key: getattr(args, key) for key in OPTION_KEYS if getattr(args, key) is not None}
    return apply_options(watermark, cli_options)


def main(argv=None):
    args = arg_parser(argv)
    try:
        watermark = build_watermark(args)
        if args.show:
            sys.stdout.buffer.write(watermark.show())
            sys.stdout.buffer.flush()
        else:
            output_path = watermark.save()
            logger.info(f"Watermarked image saved to {output_path}")
    except (WatermarkError, OSError, ValueError, OverflowError) as e:
        logger.error(e)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
