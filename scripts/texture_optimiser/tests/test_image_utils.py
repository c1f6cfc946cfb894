"""
Tests for image processing utilities.
"""

import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from PIL import Image

from ..utils.image import ImageUtils


class TestImageFormat(unittest.TestCase):
    """Test cases for extension based format selection."""

    def test_png(self):
        self.assertEqual(ImageUtils.get_image_format("a/b/texture.png"), "PNG")
        self.assertEqual(ImageUtils.get_image_format("TEXTURE.PNG"), "PNG")

    def test_jpeg(self):
        self.assertEqual(ImageUtils.get_image_format("icon.jpg"), "JPEG")
        self.assertEqual(ImageUtils.get_image_format("icon.JPEG"), "JPEG")

    def test_unknown_defaults_to_jpeg(self):
        for name in ("texture.bmp", "texture.tga", "texture"):
            self.assertEqual(ImageUtils.get_image_format(name), "JPEG")


class TestFitWithin(unittest.TestCase):
    """Test cases for aspect preserving size calculation."""

    def test_within_cap_unchanged(self):
        self.assertEqual(ImageUtils.fit_within((1024, 512), 1024), (1024, 512))

    def test_landscape(self):
        self.assertEqual(ImageUtils.fit_within((4096, 2048), 1024), (1024, 512))

    def test_portrait(self):
        self.assertEqual(ImageUtils.fit_within((1000, 3000), 1024), (341, 1024))

    def test_longest_side_hits_cap_exactly(self):
        for size in [(3000, 1000), (1025, 1), (7777, 5555), (2049, 2049)]:
            new_width, new_height = ImageUtils.fit_within(size, 1024)
            self.assertEqual(max(new_width, new_height), 1024)

    def test_aspect_ratio_preserved(self):
        for width, height in [(4000, 3000), (2048, 1536), (5000, 4999), (1300, 977)]:
            new_width, new_height = ImageUtils.fit_within((width, height), 512)
            self.assertLess(abs(new_width / new_height - width / height), 0.01)

    def test_degenerate_side_clamped_to_one_pixel(self):
        self.assertEqual(ImageUtils.fit_within((10000, 2), 1024), (1024, 1))

    def test_needs_resize(self):
        self.assertFalse(ImageUtils.needs_resize((512, 512), 512))
        self.assertTrue(ImageUtils.needs_resize((513, 10), 512))
        self.assertTrue(ImageUtils.needs_resize((10, 513), 512))


class TestSaveImage(unittest.TestCase):
    """Test cases for encoding images to disk."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_atomic_save_replaces_file(self):
        path = Path(self.temp_dir) / "texture.png"
        path.write_bytes(b"old content")

        ImageUtils.save_image(Image.new('RGBA', (8, 8), (1, 2, 3, 4)), path, 'PNG')

        with Image.open(path) as image:
            self.assertEqual(image.format, 'PNG')
            self.assertEqual(image.size, (8, 8))
        self.assertEqual(os.listdir(self.temp_dir), ["texture.png"])

    def test_failed_atomic_save_keeps_original(self):
        path = Path(self.temp_dir) / "texture.png"
        path.write_bytes(b"old content")

        with patch.object(Image.Image, 'save', side_effect=OSError("disk full")):
            with self.assertRaises(OSError):
                ImageUtils.save_image(Image.new('RGB', (8, 8)), path, 'PNG')

        self.assertEqual(path.read_bytes(), b"old content")
        self.assertEqual(os.listdir(self.temp_dir), ["texture.png"])

    def test_non_atomic_save(self):
        path = Path(self.temp_dir) / "texture.jpg"

        ImageUtils.save_image(Image.new('RGB', (8, 8)), path, 'JPEG', atomic=False)

        with Image.open(path) as image:
            self.assertEqual(image.format, 'JPEG')

    def test_jpeg_drops_alpha(self):
        path = Path(self.temp_dir) / "icon.jpg"

        ImageUtils.save_image(Image.new('RGBA', (8, 8), (10, 20, 30, 128)), path, 'JPEG')

        with Image.open(path) as image:
            self.assertEqual(image.format, 'JPEG')
            self.assertEqual(image.mode, 'RGB')

    def test_prepare_for_format_keeps_png_mode(self):
        image = Image.new('P', (4, 4))
        self.assertEqual(ImageUtils.prepare_for_format(image, 'PNG').mode, 'P')
        self.assertEqual(ImageUtils.prepare_for_format(image, 'JPEG').mode, 'RGB')

    def test_cmyk_saved_as_png(self):
        path = Path(self.temp_dir) / "texture.png"
        self.assertEqual(ImageUtils.prepare_for_format(Image.new('CMYK', (4, 4)), 'PNG').mode, 'RGB')

        ImageUtils.save_image(Image.new('CMYK', (8, 8), (0, 50, 100, 0)), path, 'PNG')

        with Image.open(path) as image:
            self.assertEqual(image.format, 'PNG')
            self.assertEqual(image.mode, 'RGB')

    @unittest.skipIf(os.name == 'nt', "POSIX permissions only")
    def test_atomic_save_keeps_permissions(self):
        path = Path(self.temp_dir) / "texture.png"
        Image.new('RGB', (8, 8)).save(path)
        os.chmod(path, 0o644)

        ImageUtils.save_image(Image.new('RGB', (4, 4)), path, 'PNG')

        self.assertEqual(os.stat(path).st_mode & 0o777, 0o644)

    def test_is_temporary_file(self):
        self.assertTrue(ImageUtils.is_temporary_file("textures/.crate.png.k2j4x9.tmp"))
        self.assertFalse(ImageUtils.is_temporary_file("textures/crate.png"))
        self.assertFalse(ImageUtils.is_temporary_file("textures/.hidden.png"))

    def test_no_pixel_count_limit(self):
        self.assertIsNone(Image.MAX_IMAGE_PIXELS)


class TestResizeWithQuality(unittest.TestCase):
    """Test cases for resampling."""

    def test_resize_methods(self):
        image = Image.new('RGB', (64, 32))
        for method in ('lanczos', 'bicubic', 'bilinear', 'unknown'):
            self.assertEqual(ImageUtils.resize_with_quality(image, (16, 8), method).size, (16, 8))


if __name__ == '__main__':
    unittest.main()
