"""
Image processing utilities for the texture optimiser.
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Tuple, Union
from PIL import Image

# No pixel-count limit; very large textures must still be downscaled
Image.MAX_IMAGE_PIXELS = None

TEMP_FILE_SUFFIX = ".tmp"

# Modes the PNG encoder writes as-is
PNG_MODES = ('1', 'L', 'LA', 'P', 'RGB', 'RGBA', 'I', 'I;16')

RESAMPLE_FILTERS = {
    'lanczos': Image.Resampling.LANCZOS,
    'bicubic': Image.Resampling.BICUBIC,
    'bilinear': Image.Resampling.BILINEAR,
}

# Extension to encoder format; anything else is written as JPEG
IMAGE_FORMATS = {
    '.png': 'PNG',
    '.jpg': 'JPEG',
    '.jpeg': 'JPEG',
}


class ImageUtils:
    """Utility class for the decode/resize/encode steps of texture optimisation."""

    @staticmethod
    def get_image_format(path: Union[str, Path]) -> str:
        """Encoder format for a file, derived from its extension."""
        extension = Path(path).suffix.lower()
        return IMAGE_FORMATS.get(extension, 'JPEG')

    @staticmethod
    def fit_within(size: Tuple[int, int], max_dimension: int) -> Tuple[int, int]:
        """
        Scale a size so its longest side is capped by ``max_dimension``.

        The result is ``floor(side * min(cap/width, cap/height))`` for each
        side, computed with integers so a side equal to the cap is never
        rounded down by float error.

        Args:
            size: Original (width, height)
            max_dimension: Longest side allowed

        Returns:
            New (width, height), each at least one pixel
        """
        width, height = size
        longest = max(width, height)
        if longest <= max_dimension:
            return width, height

        new_width = max(1, width * max_dimension // longest)
        new_height = max(1, height * max_dimension // longest)
        return new_width, new_height

    @staticmethod
    def needs_resize(size: Tuple[int, int], max_dimension: int) -> bool:
        width, height = size
        return width > max_dimension or height > max_dimension

    @staticmethod
    def resize_with_quality(image: Image.Image, target_size: Tuple[int, int],
                            method: str = 'lanczos') -> Image.Image:
        """
        Resize image with quality preservation.

        Args:
            image: Source image
            target_size: Target (width, height)
            method: Resampling method ('lanczos', 'bicubic', 'bilinear')

        Returns:
            High-quality resized image
        """
        resample = RESAMPLE_FILTERS.get(method, Image.Resampling.LANCZOS)
        return image.resize(target_size, resample)

    @staticmethod
    def prepare_for_format(image: Image.Image, format: str) -> Image.Image:
        """Convert modes the target encoder cannot store (JPEG has no alpha or palette, PNG has no CMYK)."""
        if format == 'JPEG' and image.mode not in ('RGB', 'L', 'CMYK'):
            return image.convert('RGB')
        if format == 'PNG' and image.mode not in PNG_MODES:
            has_alpha = 'A' in image.getbands()
            return image.convert('RGBA' if has_alpha else 'RGB')
        return image

    @staticmethod
    def is_temporary_file(path: Union[str, Path]) -> bool:
        """True for leftovers of an interrupted atomic save."""
        name = Path(path).name
        return name.startswith('.') and name.endswith(TEMP_FILE_SUFFIX)

    @staticmethod
    def save_image(image: Image.Image, path: Union[str, Path], format: str = 'PNG',
                   quality: int = 90, atomic: bool = True) -> None:
        """
        Encode an image to ``path``, replacing any existing file.

        Args:
            image: Image to save
            path: Output file path
            format: Image format (PNG or JPEG)
            quality: Encoder quality for JPEG
            atomic: Encode into a temporary file next to ``path`` and move it
                into place, so an interrupted write never truncates the target
        """
        path = Path(path)
        image = ImageUtils.prepare_for_format(image, format)

        save_kwargs = {'optimize': True}
        if format == 'JPEG':
            save_kwargs['quality'] = quality

        if not atomic:
            image.save(path, format=format, **save_kwargs)
            return

        fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", suffix=TEMP_FILE_SUFFIX, dir=path.parent)
        try:
            with os.fdopen(fd, 'wb') as f:
                image.save(f, format=format, **save_kwargs)
                f.flush()
                os.fsync(f.fileno())
            # mkstemp creates the file as 0600; keep the permissions of the replaced file
            if path.exists():
                shutil.copymode(path, tmp_path)
            os.replace(tmp_path, path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
