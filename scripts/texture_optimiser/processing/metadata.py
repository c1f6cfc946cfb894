"""
Loading of product pack metadata (``products.json``).

The file is owned by the product pack format and consumed read-only. Keys are
matched case-insensitively and unknown fields are ignored.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .sizing import BoxSize, ParseError, parse_box_size, surface_size


class PackMetadataError(Exception):
    """Exception raised when a pack's metadata file cannot be used."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None


@dataclass
class Product:
    """A single product and its box dimensions."""
    box_size: str
    dimensions: BoxSize

    @property
    def surface_size(self) -> int:
        return surface_size(self.dimensions)


@dataclass
class ProductLicense:
    """A license grouping a list of products."""
    products: List[Product] = field(default_factory=list)


@dataclass
class ProductMetadata:
    """Deserialized form of a pack's ``products.json``."""
    licenses: List[ProductLicense] = field(default_factory=list)

    @property
    def products(self) -> List[Product]:
        """All products across all licenses, in file order."""
        return [product for product_license in self.licenses for product in product_license.products]

    @property
    def product_count(self) -> int:
        return sum(len(product_license.products) for product_license in self.licenses)

    @property
    def max_surface_size(self) -> int:
        """Largest product surface size, 0 when the pack has no products."""
        return max((product.surface_size for product in self.products), default=0)


def load_product_metadata(path: Union[str, Path]) -> ProductMetadata:
    """
    Load and parse a ``products.json`` file.

    Args:
        path: Path to the metadata file

    Returns:
        Parsed ProductMetadata

    Raises:
        PackMetadataError: If the file is missing, not valid JSON, or a
            product entry is malformed
    """
    path = Path(path)

    try:
        with open(path, 'r', encoding='utf-8-sig') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise PackMetadataError(f"Metadata file not found: {path}", path)
    except (OSError, ValueError) as e:
        raise PackMetadataError(f"Cannot read metadata file {path}: {e}", path)

    return parse_product_metadata(data, path)


def parse_product_metadata(data: Any, path: Optional[Union[str, Path]] = None) -> ProductMetadata:
    """Build ProductMetadata from already decoded JSON data."""
    licenses_data = _require_list(_get_field(data, 'ProductLicenses'), 'ProductLicenses', path)

    licenses = []
    for license_index, license_data in enumerate(licenses_data):
        products_data = _require_list(
            _get_field(license_data, 'Products'),
            f'ProductLicenses[{license_index}].Products',
            path
        )

        products = []
        for product_index, product_data in enumerate(products_data):
            location = f'ProductLicenses[{license_index}].Products[{product_index}]'
            layout = _get_field(product_data, 'GridLayoutInBox')
            box_size = _get_field(layout, 'boxSize')
            if box_size is None:
                raise PackMetadataError(f"{location} has no GridLayoutInBox.boxSize", path)

            try:
                dimensions = parse_box_size(box_size)
            except ParseError as e:
                raise PackMetadataError(f"{location}: {e}", path) from e

            products.append(Product(box_size=box_size, dimensions=dimensions))

        licenses.append(ProductLicense(products=products))

    return ProductMetadata(licenses=licenses)


def _get_field(data: Any, name: str) -> Any:
    """Case-insensitive lookup of a JSON object field."""
    if not isinstance(data, dict):
        return None
    if name in data:
        return data[name]

    lowered = name.lower()
    for key, value in data.items():
        if isinstance(key, str) and key.lower() == lowered:
            return value
    return None


def _require_list(value: Any, name: str, path: Optional[Union[str, Path]]) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        raise PackMetadataError(f"Expected '{name}' to be a list", path)
    return value
