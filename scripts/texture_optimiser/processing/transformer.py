"""
Per-image backup and downscaling.
"""

import logging
import os
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image

from ..config import OptimiserConfig
from ..utils.image import ImageUtils


class TransformOutcome(Enum):
    """Outcome of processing a single image."""
    RESIZED = "resized"
    UNCHANGED = "unchanged"
    FAILED = "failed"


class FailureReason(Enum):
    """Why an image could not be processed."""
    NOT_FOUND = "not_found"
    DECODE_ERROR = "decode_error"
    BACKUP_ERROR = "backup_error"
    RESIZE_ERROR = "resize_error"
    WRITE_ERROR = "write_error"
    UNEXPECTED = "unexpected"


@dataclass
class TransformResult:
    """Result of processing a single image."""
    path: str
    outcome: TransformOutcome
    original_size: Optional[Tuple[int, int]] = None
    new_size: Optional[Tuple[int, int]] = None
    reason: Optional[FailureReason] = None
    backup_path: Optional[str] = None
    message: str = ""

    @property
    def resized(self) -> bool:
        return self.outcome is TransformOutcome.RESIZED

    @property
    def failed(self) -> bool:
        return self.outcome is TransformOutcome.FAILED


class TransformError(Exception):
    """Internal failure of one transform step."""

    def __init__(self, reason: FailureReason, message: str):
        super().__init__(message)
        self.reason = reason


class ImageTransformer:
    """
    Downscales one image file in place, keeping a copy of the original.

    Each call owns its file for the whole read/backup/write cycle and shares
    no state with other calls, so one instance can serve a thread pool.
    """

    def __init__(self, config: Optional[OptimiserConfig] = None,
                 logger: Optional[logging.Logger] = None):
        self.config = config or OptimiserConfig()
        self.logger = logger or logging.getLogger(__name__)

    def process(self, path: Union[str, Path], max_dimension: int,
                backup_root: Union[str, Path], root_dir: Union[str, Path]) -> TransformResult:
        """
        Resize ``path`` so neither side exceeds ``max_dimension``.

        Args:
            path: Image file to process
            max_dimension: Longest side allowed
            backup_root: Directory receiving copies of originals
            root_dir: Directory the backup layout is relative to

        Returns:
            TransformResult; failures are reported, never raised
        """
        path = Path(path)

        if not path.is_file():
            self.logger.warning(f"  Image not found: {path}")
            return TransformResult(
                path=str(path),
                outcome=TransformOutcome.FAILED,
                reason=FailureReason.NOT_FOUND,
                message="Image not found"
            )

        try:
            return self._transform(path, max_dimension, Path(backup_root), Path(root_dir))
        except TransformError as e:
            if e.reason is FailureReason.DECODE_ERROR:
                self.logger.error(f"  ERROR processing image {path}: {e}")
            else:
                self.logger.warning(f"  Failed to resize image: {path} ({e})")
            return TransformResult(
                path=str(path),
                outcome=TransformOutcome.FAILED,
                reason=e.reason,
                message=str(e)
            )
        except Exception as e:
            self.logger.error(f"  ERROR processing image {path}: {e}")
            return TransformResult(
                path=str(path),
                outcome=TransformOutcome.FAILED,
                reason=FailureReason.UNEXPECTED,
                message=str(e)
            )

    def _transform(self, path: Path, max_dimension: int,
                   backup_root: Path, root_dir: Path) -> TransformResult:
        try:
            image = Image.open(path)
        except Exception as e:
            raise TransformError(FailureReason.DECODE_ERROR, f"cannot decode image: {e}")

        with image:
            original_size = image.size
            if not ImageUtils.needs_resize(original_size, max_dimension):
                return TransformResult(
                    path=str(path),
                    outcome=TransformOutcome.UNCHANGED,
                    original_size=original_size,
                    new_size=original_size
                )

            try:
                image.load()
            except Exception as e:
                raise TransformError(FailureReason.DECODE_ERROR, f"cannot decode image: {e}")

            relative_path = os.path.relpath(path, root_dir)
            backup_path = self._backup(path, backup_root / relative_path)

            new_size = ImageUtils.fit_within(original_size, max_dimension)
            try:
                resized = ImageUtils.resize_with_quality(image, new_size, self.config.resample)
            except Exception as e:
                raise TransformError(FailureReason.RESIZE_ERROR, f"resize failed: {e}")
            if resized is None:
                raise TransformError(FailureReason.RESIZE_ERROR, "resize produced no image")

        # Source handle is closed before the original is replaced
        format = ImageUtils.get_image_format(path)
        try:
            ImageUtils.save_image(
                resized, path, format,
                quality=self.config.jpeg_quality,
                atomic=self.config.atomic_writes
            )
        except Exception as e:
            raise TransformError(FailureReason.WRITE_ERROR, f"cannot write image: {e}")

        self.logger.info(
            f"  Resized Image: ({original_size[0]}x{original_size[1]}) -> "
            f"({new_size[0]}x{new_size[1]}) [{relative_path}]"
        )

        return TransformResult(
            path=str(path),
            outcome=TransformOutcome.RESIZED,
            original_size=original_size,
            new_size=new_size,
            backup_path=str(backup_path)
        )

    def _backup(self, path: Path, backup_path: Path) -> Path:
        """Copy the current file bytes to ``backup_path``."""
        if self.config.backup_policy == "keep_first" and backup_path.exists():
            self.logger.debug(f"Keeping existing backup {backup_path}")
            return backup_path

        try:
            backup_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(path, backup_path)
        except OSError as e:
            raise TransformError(FailureReason.BACKUP_ERROR, f"cannot back up image: {e}")
        return backup_path
