"""
Utility modules for image processing.
"""

from .image import ImageUtils

__all__ = [
    "ImageUtils",
]
