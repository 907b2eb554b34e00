"""
Image decoding utilities for the sprite compiler.
"""

import io
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from ..errors import DecodeFailureError
from ..processing.bitmap import Bitmap
from ..processing.palette import PixelModel


class ImageUtils:
    """Utility class for turning image files into bitmaps."""
    
    @staticmethod
    def load_image(data: Union[bytes, str, Path, Image.Image]) -> Image.Image:
        """
        Load image from various sources.
        
        Args:
            data: Image data as bytes, file path, or PIL Image
            
        Returns:
            PIL Image object with pixel data loaded
            
        Raises:
            DecodeFailureError: If data cannot be decoded as an image
        """
        if isinstance(data, Image.Image):
            return data
        
        if isinstance(data, bytes):
            source, label = io.BytesIO(data), "<bytes>"
        elif isinstance(data, (str, Path)):
            source, label = str(data), str(data)
        else:
            raise TypeError(f"Unsupported image data type: {type(data)}")
        
        try:
            image = Image.open(source)
            image.load()
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise DecodeFailureError(label, e)
        return image
    
    @staticmethod
    def ensure_mode(image: Image.Image, pixel_model: PixelModel) -> Image.Image:
        """Convert image to RGB or RGBA mode if not already."""
        mode = pixel_model.value.upper()
        if image.mode != mode:
            return image.convert(mode)
        return image
    
    @staticmethod
    def to_bitmap(image: Image.Image, pixel_model: PixelModel) -> Bitmap:
        """Convert a PIL image into a bitmap of the given pixel model."""
        image = ImageUtils.ensure_mode(image, pixel_model)
        return Bitmap(np.asarray(image, dtype=np.uint8))
    
    @staticmethod
    def decode_file(path: Union[str, Path], pixel_model: PixelModel) -> Bitmap:
        """
        Decode an image file into a bitmap.
        
        Raises:
            DecodeFailureError: If the file cannot be read or decoded
        """
        return ImageUtils.to_bitmap(ImageUtils.load_image(path), pixel_model)
