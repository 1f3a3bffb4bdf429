import os
import tempfile
import unittest
from unittest.mock import patch

from PIL import Image

from watermarker.components.watermark import Watermark
from watermarker.utils.data_structures import AlignXEnum, Dimension, OutputFormatEnum
from watermarker.utils.errors import ConfigurationError, IoFailureError


class TestWatermark(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.image_dir = os.path.join(self.tmp.name, 'images')
        self.output_dir = os.path.join(self.tmp.name, 'output')
        self.backup_dir = os.path.join(self.tmp.name, 'backup')
        for folder in (self.image_dir, self.output_dir, self.backup_dir):
            os.makedirs(folder)
        self.image_path = os.path.join(self.image_dir, 'photo.png')
        self.logo_path = os.path.join(self.image_dir, 'logo.png')
        Image.new('RGB', (200, 100), (255, 255, 255)).save(self.image_path)
        Image.new('RGBA', (50, 25), (0, 0, 255, 255)).save(self.logo_path)

    def tearDown(self):
        self.tmp.cleanup()

    def make_watermark(self):
        return Watermark().set_original(self.image_path).set_watermark(self.logo_path)

    def test_save_next_to_original(self):
        output = self.make_watermark().save()
        self.assertEqual(output, os.path.join(self.image_dir, 'photo.jpg'))
        with Image.open(output) as image:
            self.assertEqual(image.format, 'JPEG')
            self.assertEqual(image.size, (200, 100))

    def test_save_with_destination(self):
        output = (
            self.make_watermark()
            .set_destination_path(self.output_dir)
            .set_destination_filename('result')
            .set_output_format('png')
            .set_opacity(1)
            .set_width(50)
            .set_align_x('left')
            .set_align_y('top')
            .save()
        )
        self.assertEqual(output, os.path.join(self.output_dir, 'result.png'))
        with Image.open(output) as image:
            image = image.convert('RGBA')
            self.assertEqual(image.getpixel((10, 10)), (0, 0, 255, 255))
            self.assertEqual(image.getpixel((60, 10)), (255, 255, 255, 255))

    def test_backup_copies_original(self):
        self.make_watermark().set_backup_path(self.backup_dir).set_destination_path(self.output_dir).save()
        backup_file = os.path.join(self.backup_dir, 'photo.png')
        with open(backup_file, 'rb') as backup, open(self.image_path, 'rb') as original:
            self.assertEqual(backup.read(), original.read())

    def test_backup_in_original_directory_rejected(self):
        watermark = self.make_watermark().set_backup_path(self.image_dir)
        self.assertEqual(len(watermark.errors), 1)
        with self.assertRaises(ConfigurationError):
            watermark.save()

    def test_backup_checked_when_original_set_later(self):
        watermark = Watermark().set_backup_path(self.image_dir).set_original(self.image_path)
        watermark.set_watermark(self.logo_path)
        self.assertEqual(watermark.errors, [])
        with self.assertRaises(ConfigurationError) as ctx:
            watermark.show()
        self.assertIn('cannot be the same', ctx.exception.errors[0])

    @patch('watermarker.components.watermark.shutil.copyfile', side_effect=OSError('disk full'))
    def test_backup_failure_stops_before_output(self, mock_copy):
        watermark = self.make_watermark().set_backup_path(self.backup_dir).set_destination_path(self.output_dir)
        with self.assertRaises(IoFailureError):
            watermark.save()
        mock_copy.assert_called_once()
        self.assertFalse(os.path.exists(os.path.join(self.output_dir, 'photo.jpg')))

    @patch('watermarker.components.watermark.decode_image')
    def test_missing_inputs_refused_before_decode(self, mock_decode):
        watermark = Watermark().set_original(os.path.join(self.image_dir, 'missing.png'))
        self.assertEqual(len(watermark.errors), 1)
        with self.assertRaises(ConfigurationError) as ctx:
            watermark.save()
        self.assertIn('Watermark image is not set', ctx.exception.errors)
        mock_decode.assert_not_called()

    def test_non_image_rejected(self):
        text_path = os.path.join(self.image_dir, 'notes.txt')
        with open(text_path, 'w') as f:
            f.write('hello')
        watermark = Watermark().set_watermark(text_path)
        self.assertIn('no image file', watermark.errors[0])

    def test_invalid_options_collected(self):
        watermark = (
            self.make_watermark()
            .set_output_format('bmp')
            .set_quality(150)
            .set_quality('high')
            .set_align_x('diagonal')
            .set_align_y('center')
            .set_width('-10%')
            .set_offset_x('far')
            .set_destination_path(os.path.join(self.tmp.name, 'missing'))
        )
        self.assertEqual(len(watermark.errors), 8)
        with self.assertRaises(ConfigurationError) as ctx:
            watermark.show()
        self.assertEqual(len(ctx.exception.errors), 8)

    def test_debug_logs_errors(self):
        watermark = self.make_watermark().set_quality(-1).set_debug()
        with self.assertLogs('watermarker.components.watermark', level='ERROR') as logs:
            with self.assertRaises(ConfigurationError):
                watermark.show()
        self.assertIn('Quality must be between 0 and 100', logs.output[0])

    def test_show_returns_bytes(self):
        watermark = self.make_watermark().set_output_format('png')
        self.assertTrue(watermark.show().startswith(b'\x89PNG'))
        self.assertEqual(watermark.content_type, 'image/png')

    def test_setters_update_config(self):
        watermark = (
            Watermark()
            .set_output_format('')
            .set_quality('80')
            .set_width('50%')
            .set_height(30)
            .set_align_x('right')
            .set_offset_y('-5%')
            .set_opacity('0.7')
        )
        config = watermark.config
        self.assertEqual(config.output_format, OutputFormatEnum.JPG)
        self.assertEqual(config.quality, 80)
        self.assertEqual(config.width, Dimension.percent(50))
        self.assertEqual(config.height, Dimension.pixels(30))
        self.assertEqual(config.align_x, AlignXEnum.RIGHT)
        self.assertEqual(config.offset_y, Dimension.percent(-5))
        self.assertEqual(config.opacity, 0.7)
        self.assertEqual(watermark.errors, [])

    @patch('watermarker.components.watermark.decode_image')
    def test_non_finite_numbers_rejected(self, mock_decode):
        setters = [
            ('set_width', 'inf'),
            ('set_width', 'nan'),
            ('set_height', '1e400'),
            ('set_offset_x', 'nan'),
            ('set_offset_y', float('-inf')),
            ('set_opacity', 'nan'),
            ('set_opacity', float('inf')),
        ]
        for setter, value in setters:
            watermark = self.make_watermark()
            getattr(watermark, setter)(value)
            self.assertEqual(len(watermark.errors), 1, (setter, value))
            with self.assertRaises(ConfigurationError):
                watermark.show()
        mock_decode.assert_not_called()

    def test_non_finite_numbers_keep_previous_config(self):
        watermark = self.make_watermark().set_opacity(0.5).set_opacity('nan').set_width(40).set_width('inf')
        self.assertEqual(watermark.config.opacity, 0.5)
        self.assertEqual(watermark.config.width, Dimension.pixels(40))
