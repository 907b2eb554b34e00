"""
Palette allocation: first-seen colors get sequential indices in a 256-entry
index space.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..errors import InvalidTransparencyError, PaletteOverflowError

RGB = Tuple[int, int, int]

MAX_INDEX = 255
TRANSPARENT_INDEX = 0


class PixelModel(Enum):
    """Pixel model of the source images, selecting the pipeline variant."""
    RGB = "rgb"
    RGBA = "rgba"
    
    @property
    def channels(self) -> int:
        return 3 if self is PixelModel.RGB else 4
    
    @property
    def base_index(self) -> int:
        """First index handed out to an opaque color."""
        return 0 if self is PixelModel.RGB else TRANSPARENT_INDEX + 1


class PaletteAllocator:
    """
    Deduplicates colors into palette indices.
    
    In the RGB model indices are allocated from 0 and up to 256 colors fit.
    In the RGBA model index 0 is reserved for fully transparent pixels and
    opaque colors are allocated from 1, so up to 255 colors fit.
    """
    
    def __init__(self, pixel_model: PixelModel = PixelModel.RGB):
        self.pixel_model = pixel_model
        self._palette: Dict[RGB, int] = {}
        self._next_index: Optional[int] = pixel_model.base_index
    
    @property
    def base_index(self) -> int:
        return self.pixel_model.base_index
    
    @property
    def capacity(self) -> int:
        """Number of colors that can be assigned an index."""
        return MAX_INDEX + 1 - self.base_index
    
    @property
    def is_exhausted(self) -> bool:
        return self._next_index is None
    
    def __len__(self) -> int:
        return len(self._palette)
    
    def __contains__(self, color: RGB) -> bool:
        return tuple(color) in self._palette
    
    def resolve(self, color: Tuple[int, ...]) -> int:
        """
        Get the palette index for a pixel, assigning a new one if needed.
        
        Args:
            color: (r, g, b) for the RGB model, (r, g, b, a) for the RGBA model
            
        Returns:
            Palette index in [0, 255]
            
        Raises:
            InvalidTransparencyError: If an RGBA pixel is partially transparent
            PaletteOverflowError: If a new color does not fit into the palette
        """
        if self.pixel_model is PixelModel.RGBA:
            alpha = color[3]
            if alpha == 0:
                return TRANSPARENT_INDEX
            if alpha != 255:
                raise InvalidTransparencyError(tuple(color))
        
        rgb = (color[0], color[1], color[2])
        index = self._palette.get(rgb)
        if index is not None:
            return index
        
        if self._next_index is None:
            raise PaletteOverflowError(len(self._palette), self.capacity)
        
        index = self._next_index
        self._palette[rgb] = index
        self._next_index = index + 1 if index < MAX_INDEX else None
        return index
    
    def colors(self) -> List[Tuple[int, RGB]]:
        """Get (index, color) pairs in index order."""
        return sorted((index, rgb) for rgb, index in self._palette.items())
    
    def highest_index(self) -> Optional[int]:
        """Get the highest assigned index, or None if the palette is empty."""
        if not self._palette:
            return None
        return max(self._palette.values())
