"""
Texture size heuristic driven by product box dimensions.

Larger boxes get a proportionally higher resolution allowance, but no pack is
ever capped below the base texture size.
"""

import re
from typing import Tuple, Union

SURFACE_SIZE_FACTOR = 1000
BASE_TEXTURE_SIZE = 1024
MAX_PRODUCT_ICON_SIZE = 512

_INTEGER_TOKEN = re.compile(r"^\s*[+-]?\d+\s*$")

BoxSize = Tuple[int, int, int]


class ParseError(ValueError):
    """Raised when a box size descriptor cannot be parsed."""

    def __init__(self, message: str, box_size: str = ""):
        super().__init__(message)
        self.box_size = box_size


def parse_box_size(box_size: str) -> BoxSize:
    """
    Parse a box size descriptor such as ``"_4x2x3_"`` or ``"4x2x3"``.

    Only the first three dimensions are used.

    Raises:
        ParseError: If a dimension is missing, non-numeric or not positive
    """
    if not isinstance(box_size, str):
        raise ParseError(f"Box size must be a string, got {type(box_size).__name__}", str(box_size))

    tokens = box_size.strip('_').split('x')
    if len(tokens) < 3:
        raise ParseError(f"Box size '{box_size}' needs three dimensions", box_size)

    dimensions = []
    for token in tokens[:3]:
        if not _INTEGER_TOKEN.match(token):
            raise ParseError(f"Box size '{box_size}' has non-numeric dimension '{token}'", box_size)
        dimensions.append(int(token))

    length, width, height = dimensions
    _check_positive(length, width, height, box_size)
    return length, width, height


def surface_size(dimensions: Union[BoxSize, str]) -> int:
    """Total external surface area of a box: 2*(L*W + W*H + H*L)."""
    if isinstance(dimensions, str):
        dimensions = parse_box_size(dimensions)

    length, width, height = dimensions
    _check_positive(length, width, height, f"{length}x{width}x{height}")
    return 2 * (length * width + width * height + height * length)


def max_scale(max_surface_size: int,
              base_texture_size: int = BASE_TEXTURE_SIZE,
              surface_size_factor: int = SURFACE_SIZE_FACTOR) -> int:
    """
    Longest-side pixel cap for object textures of a pack.

    Args:
        max_surface_size: Largest product surface size in the pack
        base_texture_size: Resolution granted per surface size step, and the floor
        surface_size_factor: Surface size step

    Returns:
        Pixel cap, never below ``base_texture_size``
    """
    scaling_factor = max_surface_size // surface_size_factor * base_texture_size
    if scaling_factor <= 0:
        scaling_factor = base_texture_size
    return scaling_factor


def _check_positive(length: int, width: int, height: int, box_size: str) -> None:
    if length <= 0 or width <= 0 or height <= 0:
        raise ParseError(f"Box size '{box_size}' dimensions must be positive", box_size)
