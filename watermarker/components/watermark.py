from __future__ import annotations

import dataclasses
import logging
import math
import os
import shutil

from watermarker.components.image_processing.compositor import WatermarkCompositor
from watermarker.components.image_processing.image_codec import decode_image, encode_image, is_image
from watermarker.utils.data_structures import (
    AlignXEnum,
    AlignYEnum,
    OutputFormatEnum,
    WatermarkConfig,
)
from watermarker.utils.errors import (
    ConfigurationError,
    InvalidConfigError,
    InvalidImageFormatError,
    IoFailureError,
    WatermarkError,
)
from watermarker.utils.utils import (
    check_directory_writable,
    check_if_file_exists,
    parse_dimension,
    parse_offset,
    same_directory,
)

logging.basicConfig(level=logging.INFO, format='%(levelname)s:%(message)s')


class Watermark:
    """
    Places a semi-transparent watermark image on another image.

    Setters validate their input right away and return ``self`` so calls can
    be chained. Failures are collected and reported together by ``save()``
    or ``show()``, which refuse to produce output while any are pending.

        Watermark().set_original('photo.jpg').set_watermark('logo.png') \\
            .set_align_x('right').set_offset_x(-20).save()
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.compositor = WatermarkCompositor()
        self.image_path = None
        self.watermark_path = None
        self.destination_path = None
        self.destination_filename = None
        self.backup_path = None
        self.debug = False
        self._config = WatermarkConfig()
        self._errors = []

    @property
    def config(self) -> WatermarkConfig:
        return self._config

    @property
    def errors(self) -> list[str]:
        return list(self._errors)

    @property
    def content_type(self) -> str:
        return self._config.output_format.content_type

    def _record(self, error: WatermarkError):
        self._errors.append(str(error))

    def _update(self, **changes):
        self._config = dataclasses.replace(self._config, **changes)

    def _check_image(self, path, label):
        check_if_file_exists(path)
        if not is_image(path):
            raise InvalidImageFormatError(f"{label} is no image file: {path}")

    def set_original(self, image_path):
        try:
            self._check_image(image_path, 'Original image')
            self.image_path = image_path
        except WatermarkError as e:
            self._record(e)
        return self

    def set_watermark(self, watermark_path):
        try:
            self._check_image(watermark_path, 'Watermark image')
            self.watermark_path = watermark_path
        except WatermarkError as e:
            self._record(e)
        return self

    def set_destination_path(self, destination_path):
        try:
            check_directory_writable(destination_path, 'Destination path')
            self.destination_path = destination_path
        except WatermarkError as e:
            self._record(e)
        return self

    def set_destination_filename(self, destination_filename):
        self.destination_filename = destination_filename or None
        return self

    def set_backup_path(self, backup_path):
        try:
            check_directory_writable(backup_path, 'Backup path')
            self._check_backup_differs(backup_path)
            self.backup_path = backup_path
        except WatermarkError as e:
            self._record(e)
        return self

    def _check_backup_differs(self, backup_path):
        if self.image_path is None:
            return
        origin = os.path.dirname(self.image_path)
        if same_directory(origin, backup_path):
            raise InvalidConfigError(f"Origin path {origin or '.'} and backup path {backup_path} cannot be the same")

    def set_opacity(self, opacity=1.0):
        try:
            value = float(opacity)
        except (TypeError, ValueError, OverflowError):
            self._record(InvalidConfigError(f"Opacity must be a number: {opacity!r}"))
            return self
        if not math.isfinite(value):
            self._record(InvalidConfigError(f"Opacity must be a finite number: {opacity!r}"))
            return self
        self._update(opacity=value)
        return self

    def set_width(self, width=None):
        try:
            self._update(width=parse_dimension(width, 'Width'))
        except WatermarkError as e:
            self._record(e)
        return self

    def set_height(self, height=None):
        try:
            self._update(height=parse_dimension(height, 'Height'))
        except WatermarkError as e:
            self._record(e)
        return self

    def set_align_x(self, align_x='center'):
        if AlignXEnum.has_value(align_x):
            self._update(align_x=AlignXEnum(align_x))
        else:
            self._record(InvalidConfigError(f"Horizontal alignment is unknown: {align_x!r}"))
        return self

    def set_align_y(self, align_y='middle'):
        if AlignYEnum.has_value(align_y):
            self._update(align_y=AlignYEnum(align_y))
        else:
            self._record(InvalidConfigError(f"Vertical alignment is unknown: {align_y!r}"))
        return self

    def set_offset_x(self, offset_x=0):
        try:
            self._update(offset_x=parse_offset(offset_x, 'Offset X'))
        except WatermarkError as e:
            self._record(e)
        return self

    def set_offset_y(self, offset_y=0):
        try:
            self._update(offset_y=parse_offset(offset_y, 'Offset Y'))
        except WatermarkError as e:
            self._record(e)
        return self

    def set_output_format(self, output_format='jpg'):
        try:
            self._update(output_format=OutputFormatEnum(output_format or 'jpg'))
        except ValueError:
            self._record(InvalidConfigError(f"Output format is unknown: {output_format!r}"))
        return self

    def set_quality(self, quality=100):
        if isinstance(quality, bool) or not isinstance(quality, (int, float, str)):
            self._record(InvalidConfigError(f"Quality is not an integer: {quality!r}"))
            return self
        try:
            number = float(quality)
        except ValueError:
            self._record(InvalidConfigError(f"Quality is not an integer: {quality!r}"))
            return self
        if not 0 <= number <= 100:
            self._record(InvalidConfigError(f"Quality must be between 0 and 100: {quality!r}"))
            return self
        self._update(quality=int(number))
        return self

    def set_debug(self, debug=True):
        self.debug = bool(debug)
        return self

    def _raise_on_errors(self):
        errors = list(self._errors)
        if self.image_path is None:
            errors.append('Original image is not set')
        if self.watermark_path is None:
            errors.append('Watermark image is not set')
        if self.backup_path is not None and self.image_path is not None:
            try:
                self._check_backup_differs(self.backup_path)
            except InvalidConfigError as e:
                errors.append(str(e))
        if errors:
            if self.debug:
                for error in errors:
                    self.logger.error(error)
            raise ConfigurationError(errors)

    def create_image(self):
        self._raise_on_errors()
        base = decode_image(self.image_path)
        watermark = decode_image(self.watermark_path)
        return self.compositor.composite(base, watermark, self._config)

    def output_path(self):
        if self.destination_filename:
            filename = self.destination_filename
        else:
            filename = os.path.splitext(os.path.basename(self.image_path))[0]
        path = self.destination_path or os.path.dirname(self.image_path) or '.'
        return os.path.join(path, f"{filename}.{self._config.output_format.extension}")

    def backup_original(self):
        backup_file = os.path.join(self.backup_path, os.path.basename(self.image_path))
        try:
            shutil.copyfile(self.image_path, backup_file)
        except OSError as e:
            raise IoFailureError(f"Could not copy file {self.image_path} to {backup_file}") from e
        self.logger.info(f"Backup of original saved to {backup_file}")
        return backup_file

    def save(self):
        """Write the watermarked image to disk and return its path."""
        image = self.create_image()
        if self.backup_path is not None:
            self.backup_original()
        return encode_image(image, self._config.output_format, self._config.quality, self.output_path())

    def show(self):
        """Return the watermarked image encoded in the output format."""
        image = self.create_image()
        return encode_image(image, self._config.output_format, self._config.quality)
