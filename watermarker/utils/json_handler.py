from __future__ import annotations

import json
import logging

from watermarker.utils.data_structures import OPTION_KEYS
from watermarker.utils.errors import InvalidConfigError

logger = logging.getLogger(__name__)

# option name -> Watermark setter
SETTERS = {
    'opacity': 'set_opacity',
    'width': 'set_width',
    'height': 'set_height',
    'align_x': 'set_align_x',
    'align_y': 'set_align_y',
    'offset_x': 'set_offset_x',
    'offset_y': 'set_offset_y',
    'output_format': 'set_output_format',
    'quality': 'set_quality',
    'debug': 'set_debug',
    'destination_path': 'set_destination_path',
    'destination_filename': 'set_destination_filename',
    'backup_path': 'set_backup_path',
}


def load_json(filepath):
    with open(filepath) as f:
        raw_data = json.load(f)
    return raw_data


def validate_options(options) -> dict:
    if not isinstance(options, dict):
        raise InvalidConfigError(f"Options must be a JSON object, got {type(options).__name__}")
    unknown = [key for key in options if key not in OPTION_KEYS]
    if unknown:
        logger.error(f"Unsupported option(s): {', '.join(unknown)}")
        raise InvalidConfigError(f"Unsupported option(s): {', '.join(unknown)}")
    return options


def load_options(file_path) -> dict:
    try:
        options = load_json(file_path)
        logger.info(f"Loaded JSON file: {file_path}")
    except FileNotFoundError:
        logger.error(f"File not found: {file_path}")
        raise
    except json.JSONDecodeError as e:
        logger.error(f"Error decoding JSON: {e}")
        raise
    return validate_options(options)


def save_options(options, file_path):
    with open(file_path, 'w') as f:
        json.dump(validate_options(options), f, indent=4)


def apply_options(watermark, options):
    """Call the matching setter of ``watermark`` for every option, in file order."""
    for key, value in validate_options(options).items():
        getattr(watermark, SETTERS[key])(value)
    return watermark
