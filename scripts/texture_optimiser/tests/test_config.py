"""
Tests for optimiser configuration and environment overrides.
"""

import os
import unittest
from unittest.mock import patch

from ..config import OptimiserConfig


class TestOptimiserConfig(unittest.TestCase):
    """Test cases for OptimiserConfig."""

    def test_defaults(self):
        config = OptimiserConfig()

        self.assertEqual(config.metadata_filename, "products.json")
        self.assertEqual(config.textures_dir_name, "objects_textures")
        self.assertEqual(config.icons_dir_name, "products_icons")
        self.assertEqual(config.backup_dir_name, "backup_textures")
        self.assertEqual(config.max_icon_size, 512)
        self.assertEqual(config.base_texture_size, 1024)
        self.assertEqual(config.surface_size_factor, 1000)
        self.assertEqual(config.jpeg_quality, 90)
        self.assertEqual(config.backup_policy, "overwrite")
        self.assertTrue(config.atomic_writes)
        self.assertEqual(config.validate(), [])

    def test_worker_count(self):
        self.assertEqual(OptimiserConfig(max_workers=3).worker_count, 3)

        with patch("os.cpu_count", return_value=None):
            self.assertEqual(OptimiserConfig().worker_count, 1)
        with patch("os.cpu_count", return_value=12):
            self.assertEqual(OptimiserConfig().worker_count, 12)

    @patch.dict(os.environ, {
        "TEXTURE_OPTIMISER_MAX_ICON_SIZE": "256",
        "TEXTURE_OPTIMISER_BASE_TEXTURE_SIZE": "2048",
        "TEXTURE_OPTIMISER_JPEG_QUALITY": "75",
        "TEXTURE_OPTIMISER_RESAMPLE": "BICUBIC",
        "TEXTURE_OPTIMISER_ATOMIC_WRITES": "false",
        "TEXTURE_OPTIMISER_BACKUP_POLICY": "keep_first",
        "TEXTURE_OPTIMISER_BACKUP_DIR_NAME": "originals",
        "TEXTURE_OPTIMISER_MAX_WORKERS": "2",
    })
    def test_environment_overrides(self):
        config = OptimiserConfig.default()

        self.assertEqual(config.max_icon_size, 256)
        self.assertEqual(config.base_texture_size, 2048)
        self.assertEqual(config.surface_size_factor, 1000)
        self.assertEqual(config.jpeg_quality, 75)
        self.assertEqual(config.resample, "bicubic")
        self.assertFalse(config.atomic_writes)
        self.assertEqual(config.backup_policy, "keep_first")
        self.assertEqual(config.backup_dir_name, "originals")
        self.assertEqual(config.max_workers, 2)
        self.assertEqual(config.validate(), [])

    @patch.dict(os.environ, {"TEXTURE_OPTIMISER_MAX_WORKERS": "0"})
    def test_zero_workers_means_cpu_count(self):
        self.assertIsNone(OptimiserConfig.from_env().max_workers)

    @patch.dict(os.environ, {"TEXTURE_OPTIMISER_JPEG_QUALITY": "high"})
    def test_non_numeric_override(self):
        with self.assertRaises(ValueError):
            OptimiserConfig.default()

    def test_validate_errors(self):
        config = OptimiserConfig(
            max_icon_size=0,
            base_texture_size=-1,
            surface_size_factor=0,
            jpeg_quality=101,
            resample="nearest",
            backup_policy="never",
            max_workers=0,
            backup_dir_name=""
        )

        errors = config.validate()

        self.assertEqual(len(errors), 8)
        self.assertIn("jpeg_quality must be between 1 and 100", errors)
        self.assertTrue(any(error.startswith("backup_policy") for error in errors))


if __name__ == '__main__':
    unittest.main()
