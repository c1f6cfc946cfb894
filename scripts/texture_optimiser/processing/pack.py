"""
Processing of a single product pack directory.
"""

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from ..config import OptimiserConfig
from ..utils.image import ImageUtils
from .metadata import PackMetadataError, load_product_metadata
from .sizing import max_scale
from .transformer import FailureReason, ImageTransformer, TransformOutcome, TransformResult


class PackStatus(Enum):
    """Status of a processed pack."""
    PROCESSED = "processed"
    FAILED = "failed"


@dataclass
class PackStats:
    """Counters for one product pack."""
    pack_dir: str
    relative_path: str
    status: PackStatus = PackStatus.PROCESSED
    product_count: int = 0
    texture_count: int = 0
    resized_texture_count: int = 0
    failed_texture_count: int = 0
    max_surface_size: int = 0
    object_scale: int = 0
    duration: float = 0.0
    error: Optional[str] = None
    results: List[TransformResult] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.status is PackStatus.FAILED


class PackProcessor:
    """
    Resizes the object textures and product icons of one pack.

    Object textures are capped by a scale derived from the largest product box
    in ``products.json``; icons use a fixed cap.
    """

    def __init__(self, config: Optional[OptimiserConfig] = None,
                 transformer: Optional[ImageTransformer] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the pack processor.

        Args:
            config: Optimiser configuration
            transformer: Image transformer shared by all worker threads
            logger: Logger receiving pack summaries
        """
        self.config = config or OptimiserConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.transformer = transformer or ImageTransformer(self.config, self.logger)

    def is_pack(self, pack_dir: Union[str, Path]) -> bool:
        return (Path(pack_dir) / self.config.metadata_filename).is_file()

    def process(self, pack_dir: Union[str, Path], root_dir: Union[str, Path],
                backup_dir: Union[str, Path]) -> Optional[PackStats]:
        """
        Process one directory.

        Args:
            pack_dir: Candidate pack directory
            root_dir: Scan root; used for log paths and the backup layout
            backup_dir: Backup root for original images

        Returns:
            PackStats, or None when the directory holds no metadata file
        """
        pack_dir = Path(pack_dir)
        if not self.is_pack(pack_dir):
            return None

        start_time = time.time()
        stats = PackStats(
            pack_dir=str(pack_dir),
            relative_path=os.path.relpath(pack_dir, root_dir)
        )

        try:
            metadata = load_product_metadata(pack_dir / self.config.metadata_filename)
        except PackMetadataError as e:
            stats.status = PackStatus.FAILED
            stats.error = e.message
            stats.duration = time.time() - start_time
            self.logger.error(f"-- {stats.relative_path} -- metadata error: {e.message}")
            return stats

        stats.product_count = metadata.product_count
        stats.max_surface_size = metadata.max_surface_size
        stats.object_scale = max_scale(
            stats.max_surface_size,
            self.config.base_texture_size,
            self.config.surface_size_factor
        )

        batches = [
            (pack_dir / self.config.textures_dir_name, stats.object_scale),
            (pack_dir / self.config.icons_dir_name, self.config.max_icon_size),
        ]
        for asset_dir, max_dimension in batches:
            if not asset_dir.is_dir():
                continue

            try:
                files = self._list_files(asset_dir)
            except OSError as e:
                stats.status = PackStatus.FAILED
                stats.error = f"Cannot list {asset_dir}: {e}"
                self.logger.error(f"-- {stats.relative_path} -- {stats.error}")
                continue

            stats.texture_count += len(files)
            stats.results.extend(self._process_batch(files, max_dimension, root_dir, backup_dir))

        stats.resized_texture_count = sum(1 for result in stats.results if result.resized)
        stats.failed_texture_count = sum(1 for result in stats.results if result.failed)
        stats.duration = time.time() - start_time

        self._log_summary(stats)
        return stats

    def _list_files(self, asset_dir: Path) -> List[Path]:
        """Regular files directly inside ``asset_dir``, sorted by name, without save leftovers."""
        return sorted(
            entry for entry in asset_dir.iterdir()
            if entry.is_file() and not ImageUtils.is_temporary_file(entry)
        )

    def _process_batch(self, files: List[Path], max_dimension: int,
                       root_dir: Union[str, Path], backup_dir: Union[str, Path]) -> List[TransformResult]:
        """Transform a batch of files on a bounded thread pool and collect the results."""
        if not files:
            return []

        results = []
        workers = min(self.config.worker_count, len(files))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self.transformer.process, file, max_dimension, backup_dir, root_dir): file
                for file in files
            }
            for future in as_completed(futures):
                try:
                    results.append(future.result())
                except Exception as e:
                    file = futures[future]
                    self.logger.error(f"  ERROR processing image {file}: {e}")
                    results.append(TransformResult(
                        path=str(file),
                        outcome=TransformOutcome.FAILED,
                        reason=FailureReason.UNEXPECTED,
                        message=str(e)
                    ))

        return results

    def _log_summary(self, stats: PackStats) -> None:
        self.logger.info(f"-- {stats.relative_path} --")
        self.logger.info(f"  Products: {stats.product_count}")
        self.logger.info(f"  Textures: {stats.texture_count}")
        self.logger.info(f"  Resized Textures: {stats.resized_texture_count}")
        if stats.failed_texture_count:
            self.logger.warning(f"  Failed Textures: {stats.failed_texture_count}")
