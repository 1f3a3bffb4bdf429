from __future__ import annotations

import math
import os

from watermarker.utils.data_structures import Dimension
from watermarker.utils.errors import InvalidConfigError, NotFoundError, PathNotWritableError


def to_pixel(value: float) -> int:
    # round half up, int() alone would truncate toward zero
    return int(math.floor(value + 0.5))


def _parse_number(value, name):
    if isinstance(value, bool):
        raise InvalidConfigError(f"{name} must be a number or a percentage: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidConfigError(f"{name} must be a number or a percentage: {value!r}") from None
    if not math.isfinite(number):
        raise InvalidConfigError(f"{name} must be a finite number: {value!r}")
    if isinstance(value, (int, float)):
        return value
    return int(number) if number.is_integer() else number


def parse_dimension(value, name='dimension') -> Dimension:
    """Parse a watermark width or height.

    ``None``, ``""`` and ``0`` mean auto, ``300`` / ``"300"`` are pixels and
    ``"33%"`` is a percentage of the base image. Negative sizes are rejected.
    """
    if isinstance(value, Dimension):
        return value
    if value is None or (isinstance(value, str) and value.strip() == ''):
        return Dimension.auto()
    if isinstance(value, str) and value.strip().endswith('%'):
        number = _parse_number(value.strip()[:-1], name)
        if number <= 0:
            raise InvalidConfigError(f"{name} percentage must be positive: {value!r}")
        return Dimension.percent(float(number))
    number = _parse_number(value, name)
    if number == 0:
        return Dimension.auto()
    if number < 0:
        raise InvalidConfigError(f"{name} must be positive: {value!r}")
    return Dimension.pixels(number)


def parse_offset(value, name='offset') -> Dimension:
    """Parse a signed offset given in pixels (``-20``) or percent (``"-5%"``)."""
    if isinstance(value, Dimension):
        if value.is_auto:
            raise InvalidConfigError(f"{name} cannot be auto")
        return value
    if value is None or (isinstance(value, str) and value.strip() == ''):
        return Dimension.pixels(0)
    if isinstance(value, str) and value.strip().endswith('%'):
        return Dimension.percent(float(_parse_number(value.strip()[:-1], name)))
    return Dimension.pixels(_parse_number(value, name))


def check_if_file_exists(path):
    if not os.path.isfile(path):
        raise NotFoundError(f"File not found: {path}")


def check_directory_writable(path, label='Directory'):
    if not os.path.isdir(path):
        raise NotFoundError(f"{label} does not exist: {path}")
    if not os.access(path, os.W_OK):
        raise PathNotWritableError(f"{label} is not writable: {path}")


def same_directory(first, second) -> bool:
    return os.path.realpath(first or '.') == os.path.realpath(second or '.')
