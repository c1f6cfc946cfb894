"""
Processing modules for size heuristics, pack metadata, image transformation and pack processing.
"""

from .sizing import (
    ParseError,
    parse_box_size,
    surface_size,
    max_scale,
    BASE_TEXTURE_SIZE,
    SURFACE_SIZE_FACTOR,
    MAX_PRODUCT_ICON_SIZE,
)
from .metadata import ProductMetadata, ProductLicense, Product, PackMetadataError, load_product_metadata
from .transformer import ImageTransformer, TransformResult, TransformOutcome, FailureReason
from .pack import PackProcessor, PackStats, PackStatus

__all__ = [
    "ParseError",
    "parse_box_size",
    "surface_size",
    "max_scale",
    "BASE_TEXTURE_SIZE",
    "SURFACE_SIZE_FACTOR",
    "MAX_PRODUCT_ICON_SIZE",
    "ProductMetadata",
    "ProductLicense",
    "Product",
    "PackMetadataError",
    "load_product_metadata",
    "ImageTransformer",
    "TransformResult",
    "TransformOutcome",
    "FailureReason",
    "PackProcessor",
    "PackStats",
    "PackStatus",
]
