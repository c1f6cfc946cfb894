"""
Texture Optimiser for More Products packs

Downscales oversized object textures and product icons of product packs,
keeping a copy of every original in a backup directory next to the packs.
"""

__version__ = "1.0.0"
__author__ = "MoreProducts Texture Optimiser Team"

from .config import OptimiserConfig
from .pipeline import TextureOptimiser, RunSummary, ConfigurationError, run_optimization
from .processing.pack import PackProcessor, PackStats
from .processing.transformer import ImageTransformer, TransformResult, TransformOutcome

__all__ = [
    "OptimiserConfig",
    "TextureOptimiser",
    "RunSummary",
    "ConfigurationError",
    "run_optimization",
    "PackProcessor",
    "PackStats",
    "ImageTransformer",
    "TransformResult",
    "TransformOutcome",
]
