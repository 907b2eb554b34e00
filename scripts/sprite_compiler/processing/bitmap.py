"""
Bitmap and rectangle primitives plus sub-rectangle extraction.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from ..errors import RectOutOfBoundsError

Pixel = Tuple[int, ...]


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in pixel coordinates."""
    x: int
    y: int
    w: int
    h: int
    
    @property
    def right(self) -> int:
        return self.x + self.w
    
    @property
    def bottom(self) -> int:
        return self.y + self.h
    
    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.w, self.h)
    
    def fits_within(self, width: int, height: int) -> bool:
        """Check if the rectangle lies entirely inside a width×height area."""
        if min(self.x, self.y, self.w, self.h) < 0:
            return False
        return self.right <= width and self.bottom <= height


class Bitmap:
    """
    A width×height grid of pixels with 3 (RGB) or 4 (RGBA) channels.
    
    Pixels are held in a uint8 array of shape (height, width, channels).
    """
    
    def __init__(self, pixels: np.ndarray):
        if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
            raise ValueError(f"Bitmap pixels must have shape (height, width, 3|4), got {pixels.shape}")
        self.pixels = pixels.astype(np.uint8, copy=False)
    
    @classmethod
    def from_buffer(cls, width: int, height: int, buffer: Sequence[Pixel]) -> "Bitmap":
        """Create a bitmap from a flat row-major buffer of pixel tuples."""
        if len(buffer) != width * height:
            raise ValueError(
                f"Buffer holds {len(buffer)} pixels, expected {width}×{height} = {width * height}"
            )
        if not buffer:
            return cls(np.zeros((height, width, 3), dtype=np.uint8))
        
        channels = len(buffer[0])
        pixels = np.array(buffer, dtype=np.uint8).reshape(height, width, channels)
        return cls(pixels)
    
    @property
    def width(self) -> int:
        return self.pixels.shape[1]
    
    @property
    def height(self) -> int:
        return self.pixels.shape[0]
    
    @property
    def channels(self) -> int:
        return self.pixels.shape[2]
    
    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)
    
    @property
    def buffer(self) -> List[Pixel]:
        """Flat row-major list of pixel tuples."""
        return [tuple(px) for px in self.pixels.reshape(-1, self.channels).tolist()]
    
    def pixel(self, x: int, y: int) -> Pixel:
        """Get the pixel at column x, row y."""
        return tuple(self.pixels[y, x].tolist())
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bitmap):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and bool(np.array_equal(self.pixels, other.pixels))
    
    def __repr__(self) -> str:
        return f"Bitmap({self.width}×{self.height}, channels={self.channels})"


def extract_rect(source: Bitmap, rect: Rect) -> Bitmap:
    """
    Copy a sub-rectangle out of a bitmap.
    
    Args:
        source: Bitmap to copy from
        rect: Rectangle to extract
        
    Returns:
        New rect.w×rect.h bitmap, pixel (i, j) equal to source pixel (x+i, y+j)
        
    Raises:
        RectOutOfBoundsError: If the rectangle does not fit inside the source
    """
    # numpy slicing clamps silently, so bounds are checked up front
    if not rect.fits_within(source.width, source.height):
        raise RectOutOfBoundsError(rect.as_tuple(), source.size)
    
    return Bitmap(source.pixels[rect.y:rect.bottom, rect.x:rect.right].copy())
