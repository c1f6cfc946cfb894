"""
Configuration for the texture optimiser.
Defaults reproduce the fixed limits of the product pack layout; environment
variables can override them when the optimiser is launched from the CLI.
"""

import os
from dataclasses import dataclass
from typing import List, Optional


BACKUP_POLICIES = ("overwrite", "keep_first")
RESAMPLE_METHODS = ("lanczos", "bicubic", "bilinear")


@dataclass
class OptimiserConfig:
    """Main configuration class for the texture optimiser."""

    # Pack layout
    metadata_filename: str = "products.json"
    textures_dir_name: str = "objects_textures"
    icons_dir_name: str = "products_icons"
    backup_dir_name: str = "backup_textures"

    # Sizing
    max_icon_size: int = 512
    base_texture_size: int = 1024
    surface_size_factor: int = 1000

    # Output settings
    jpeg_quality: int = 90
    resample: str = "lanczos"
    atomic_writes: bool = True
    backup_policy: str = "overwrite"

    # Concurrency
    max_workers: Optional[int] = None

    @property
    def worker_count(self) -> int:
        """Number of threads used per asset batch."""
        return self.max_workers or os.cpu_count() or 1

    @classmethod
    def default(cls) -> "OptimiserConfig":
        """Create default configuration with environment variable overrides."""
        return cls._apply_env_overrides(cls())

    @classmethod
    def from_env(cls) -> "OptimiserConfig":
        """Create configuration from environment variables only."""
        return cls._apply_env_overrides(cls())

    @classmethod
    def _apply_env_overrides(cls, config: "OptimiserConfig") -> "OptimiserConfig":
        """Apply environment variable overrides to configuration."""

        # Sizing
        if os.getenv('TEXTURE_OPTIMISER_MAX_ICON_SIZE'):
            config.max_icon_size = int(os.getenv('TEXTURE_OPTIMISER_MAX_ICON_SIZE', '512'))

        if os.getenv('TEXTURE_OPTIMISER_BASE_TEXTURE_SIZE'):
            config.base_texture_size = int(os.getenv('TEXTURE_OPTIMISER_BASE_TEXTURE_SIZE', '1024'))

        if os.getenv('TEXTURE_OPTIMISER_SURFACE_SIZE_FACTOR'):
            config.surface_size_factor = int(os.getenv('TEXTURE_OPTIMISER_SURFACE_SIZE_FACTOR', '1000'))

        # Output settings
        if os.getenv('TEXTURE_OPTIMISER_JPEG_QUALITY'):
            config.jpeg_quality = int(os.getenv('TEXTURE_OPTIMISER_JPEG_QUALITY', '90'))

        if os.getenv('TEXTURE_OPTIMISER_RESAMPLE'):
            config.resample = os.getenv('TEXTURE_OPTIMISER_RESAMPLE', 'lanczos').lower()

        if os.getenv('TEXTURE_OPTIMISER_ATOMIC_WRITES'):
            config.atomic_writes = os.getenv('TEXTURE_OPTIMISER_ATOMIC_WRITES', 'true').lower() == 'true'

        if os.getenv('TEXTURE_OPTIMISER_BACKUP_POLICY'):
            config.backup_policy = os.getenv('TEXTURE_OPTIMISER_BACKUP_POLICY', 'overwrite').lower()

        if os.getenv('TEXTURE_OPTIMISER_BACKUP_DIR_NAME'):
            config.backup_dir_name = os.getenv('TEXTURE_OPTIMISER_BACKUP_DIR_NAME', 'backup_textures')

        # Concurrency
        if os.getenv('TEXTURE_OPTIMISER_MAX_WORKERS'):
            config.max_workers = int(os.getenv('TEXTURE_OPTIMISER_MAX_WORKERS', '0')) or None

        return config

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if self.max_icon_size <= 0:
            errors.append("max_icon_size must be positive")

        if self.base_texture_size <= 0:
            errors.append("base_texture_size must be positive")

        if self.surface_size_factor <= 0:
            errors.append("surface_size_factor must be positive")

        if not 1 <= self.jpeg_quality <= 100:
            errors.append("jpeg_quality must be between 1 and 100")

        if self.resample not in RESAMPLE_METHODS:
            errors.append(f"resample must be one of {', '.join(RESAMPLE_METHODS)}")

        if self.backup_policy not in BACKUP_POLICIES:
            errors.append(f"backup_policy must be one of {', '.join(BACKUP_POLICIES)}")

        if self.max_workers is not None and self.max_workers <= 0:
            errors.append("max_workers must be positive")

        if not self.backup_dir_name:
            errors.append("backup_dir_name must not be empty")

        return errors
