"""
Tile compilation: slices a sprite bitmap into 8×8 tiles of palette indices.
"""

import logging
from typing import List, Tuple

from .bitmap import Bitmap, Rect, extract_rect
from .palette import PaletteAllocator

TILE_SIZE = 8
TILE_PIXELS = TILE_SIZE * TILE_SIZE

Tile = Tuple[int, ...]

logger = logging.getLogger(__name__)


def tile_grid(bitmap: Bitmap) -> Tuple[int, int]:
    """Get the number of whole tiles across and down a bitmap."""
    return bitmap.width // TILE_SIZE, bitmap.height // TILE_SIZE


def truncated_dimensions(bitmap: Bitmap) -> bool:
    """Check if a bitmap has pixels that do not fall in a whole tile."""
    return bitmap.width % TILE_SIZE != 0 or bitmap.height % TILE_SIZE != 0


class TileCompiler:
    """Converts sprite bitmaps into tiles through a shared palette."""
    
    def __init__(self, allocator: PaletteAllocator):
        self.allocator = allocator
    
    def compile_tile(self, bitmap: Bitmap, tile_x: int, tile_y: int) -> Tile:
        """Map the 8×8 block at tile coordinates (tile_x, tile_y) to palette indices."""
        block = extract_rect(bitmap, Rect(tile_x * TILE_SIZE, tile_y * TILE_SIZE, TILE_SIZE, TILE_SIZE))
        pixels = block.pixels.reshape(-1, block.channels).tolist()
        return tuple(self.allocator.resolve(px) for px in pixels)
    
    def compile_sprite(self, bitmap: Bitmap, name: str = "") -> List[Tile]:
        """
        Compile a sprite bitmap into tiles.
        
        Tiles are ordered by tile row, then tile column. Pixels beyond the last
        whole tile in either direction are dropped.
        
        Args:
            bitmap: Extracted sprite bitmap
            name: Sprite name, used for log messages
            
        Returns:
            List of tiles, each a tuple of 64 palette indices
        """
        x_tiles, y_tiles = tile_grid(bitmap)
        
        if truncated_dimensions(bitmap):
            logger.warning(
                f"Sprite '{name}' is {bitmap.width}×{bitmap.height}, not a multiple of {TILE_SIZE}; "
                f"compiling only the top-left {x_tiles * TILE_SIZE}×{y_tiles * TILE_SIZE} pixels"
            )
        
        tiles = []
        for tile_y in range(y_tiles):
            for tile_x in range(x_tiles):
                tiles.append(self.compile_tile(bitmap, tile_x, tile_y))
        
        logger.debug(f"Sprite '{name}': {len(tiles)} tiles ({x_tiles}×{y_tiles})")
        return tiles
