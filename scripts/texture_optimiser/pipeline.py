"""
Texture optimisation coordinator.
Discovers product packs under a root directory, processes them one after
another and reports the totals.
"""

import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Union

from .config import OptimiserConfig
from .processing.pack import PackProcessor, PackStats


class ConfigurationError(Exception):
    """Raised when the optimiser cannot start, e.g. the root directory is missing."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = str(path) if path is not None else None


@dataclass
class RunSummary:
    """Totals of one optimisation run."""
    root_dir: str
    backup_dir: str
    packs: List[PackStats] = field(default_factory=list)
    directories_scanned: int = 0
    packs_skipped: int = 0
    duration_ms: int = 0

    @property
    def product_count(self) -> int:
        return sum(pack.product_count for pack in self.packs)

    @property
    def texture_count(self) -> int:
        return sum(pack.texture_count for pack in self.packs)

    @property
    def resized_texture_count(self) -> int:
        return sum(pack.resized_texture_count for pack in self.packs)

    @property
    def failed_texture_count(self) -> int:
        return sum(pack.failed_texture_count for pack in self.packs)

    @property
    def failed_packs(self) -> List[PackStats]:
        return [pack for pack in self.packs if pack.failed]


class TextureOptimiser:
    """
    Main coordinator for a texture optimisation run.

    Every directory below the root is handed to the PackProcessor, which
    skips directories without pack metadata. Packs run sequentially so the
    log output stays grouped per pack.
    """

    def __init__(self, config: Optional[OptimiserConfig] = None,
                 pack_processor: Optional[PackProcessor] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the optimiser.

        Args:
            config: Optimiser configuration
            pack_processor: Processor for individual packs
            logger: Logger for run-level events

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.config = config or OptimiserConfig()
        errors = self.config.validate()
        if errors:
            raise ConfigurationError(f"Invalid configuration: {'; '.join(errors)}")

        self.logger = logger or logging.getLogger(__name__)
        self.pack_processor = pack_processor or PackProcessor(self.config, logger=self.logger)

    def default_backup_dir(self, root_dir: Union[str, Path]) -> Path:
        """Backup directory placed next to the scanned root."""
        return Path(root_dir).parent / self.config.backup_dir_name

    def discover_directories(self, root_dir: Union[str, Path]) -> Iterator[Path]:
        """Yield every directory below ``root_dir`` at any depth, in sorted order."""
        for dirpath, dirnames, _ in os.walk(root_dir):
            dirnames.sort()
            for dirname in dirnames:
                yield Path(dirpath) / dirname

    def run(self, root_dir: Union[str, Path],
            backup_dir: Optional[Union[str, Path]] = None) -> RunSummary:
        """
        Optimise all packs below ``root_dir``.

        Args:
            root_dir: Directory containing the product packs
            backup_dir: Where originals are copied; defaults to a sibling of root

        Returns:
            RunSummary with per-pack statistics

        Raises:
            ConfigurationError: If ``root_dir`` does not exist
        """
        root_dir = Path(root_dir).resolve()
        if not root_dir.is_dir():
            self.logger.error(f"Product pack directory does not exist: {root_dir}")
            raise ConfigurationError(f"Product pack directory does not exist: {root_dir}", root_dir)

        backup_dir = Path(backup_dir).resolve() if backup_dir else self.default_backup_dir(root_dir)
        summary = RunSummary(root_dir=str(root_dir), backup_dir=str(backup_dir))

        start_time = time.perf_counter()
        for pack_dir in self.discover_directories(root_dir):
            summary.directories_scanned += 1
            stats = self.pack_processor.process(pack_dir, root_dir, backup_dir)
            if stats is None:
                summary.packs_skipped += 1
            else:
                summary.packs.append(stats)

        summary.duration_ms = int((time.perf_counter() - start_time) * 1000)

        if summary.failed_packs:
            self.logger.warning(f"{len(summary.failed_packs)} product pack(s) could not be processed")
        self.logger.info(f"Texture optimisation completed in {summary.duration_ms} ms!")

        return summary


def run_optimization(root_dir: Union[str, Path],
                     backup_dir: Optional[Union[str, Path]] = None,
                     config: Optional[OptimiserConfig] = None,
                     logger: Optional[logging.Logger] = None) -> RunSummary:
    """Run texture optimisation over ``root_dir``; entry point for host applications."""
    return TextureOptimiser(config, logger=logger).run(root_dir, backup_dir)
