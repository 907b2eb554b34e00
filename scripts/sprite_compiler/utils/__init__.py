"""
Utility modules for image decoding.
"""

from .image import ImageUtils

__all__ = [
    "ImageUtils",
]
