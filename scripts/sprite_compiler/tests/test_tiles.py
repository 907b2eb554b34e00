"""
Tests for tile compilation.
"""

import unittest

from ..processing.bitmap import Bitmap
from ..processing.palette import PaletteAllocator, PixelModel
from ..processing.tiles import TileCompiler, TILE_PIXELS, tile_grid, truncated_dimensions
from ..errors import InvalidTransparencyError, PaletteOverflowError


def solid(width: int, height: int, color) -> Bitmap:
    return Bitmap.from_buffer(width, height, [color] * (width * height))


class TestTileCompiler(unittest.TestCase):
    """Test cases for TileCompiler."""
    
    def setUp(self):
        self.allocator = PaletteAllocator(PixelModel.RGB)
        self.compiler = TileCompiler(self.allocator)
    
    def test_tiling_shape(self):
        """A W×H sprite compiles to (W//8)*(H//8) tiles of 64 indices."""
        for width, height in [(8, 8), (16, 8), (8, 24), (32, 16)]:
            tiles = self.compiler.compile_sprite(solid(width, height, (1, 2, 3)))
            self.assertEqual(len(tiles), (width // 8) * (height // 8))
            for tile in tiles:
                self.assertEqual(len(tile), TILE_PIXELS)
    
    def test_tile_order_rows_then_columns(self):
        """Tiles run across a tile row before moving down."""
        # 16×16 sprite, each 8×8 quadrant a different color
        quadrant_colors = {(0, 0): (10, 0, 0), (1, 0): (20, 0, 0), (0, 1): (30, 0, 0), (1, 1): (40, 0, 0)}
        buffer = [quadrant_colors[(x // 8, y // 8)] for y in range(16) for x in range(16)]
        
        tiles = self.compiler.compile_sprite(Bitmap.from_buffer(16, 16, buffer))
        
        # palette indices follow first-seen order: top-left, top-right, bottom-left, bottom-right
        self.assertEqual([set(tile) for tile in tiles], [{0}, {1}, {2}, {3}])
    
    def test_pixel_order_within_tile(self):
        """Pixel (tx, ty) of a tile is at position ty * 8 + tx."""
        buffer = [(x, y, 0) for y in range(8) for x in range(8)]
        tile = self.compiler.compile_sprite(Bitmap.from_buffer(8, 8, buffer))[0]
        
        # every pixel is distinct so indices are allocated in row-major order
        self.assertEqual(list(tile), list(range(64)))
        self.assertEqual(self.allocator.colors()[9], (9, (1, 1, 0)))
    
    def test_truncates_partial_tiles(self):
        bitmap = solid(20, 13, (5, 5, 5))
        
        with self.assertLogs("sprite_compiler.processing.tiles", level="WARNING") as logs:
            tiles = self.compiler.compile_sprite(bitmap, "odd")
        
        self.assertEqual(len(tiles), 2)
        self.assertIn("odd", logs.output[0])
        self.assertIn("20×13", logs.output[0])
    
    def test_truncated_pixels_not_in_palette(self):
        """Colors that only appear outside whole tiles never reach the palette."""
        buffer = [(200, 0, 0) if x >= 8 else (1, 1, 1) for y in range(8) for x in range(12)]
        
        with self.assertLogs("sprite_compiler.processing.tiles", level="WARNING"):
            self.compiler.compile_sprite(Bitmap.from_buffer(12, 8, buffer))
        
        self.assertNotIn((200, 0, 0), self.allocator)
        self.assertEqual(len(self.allocator), 1)
    
    def test_sprite_smaller_than_tile(self):
        with self.assertLogs("sprite_compiler.processing.tiles", level="WARNING"):
            tiles = self.compiler.compile_sprite(solid(7, 7, (1, 1, 1)))
        self.assertEqual(tiles, [])
    
    def test_palette_shared_across_sprites(self):
        first = self.compiler.compile_sprite(solid(8, 8, (1, 1, 1)))
        second = self.compiler.compile_sprite(solid(8, 8, (1, 1, 1)))
        self.assertEqual(first, second)
        self.assertEqual(len(self.allocator), 1)
    
    def test_overflow_propagates(self):
        # 16×16 of distinct colors: 256 fit, so add one more sprite with a new color
        buffer = [(x, y, 0) for y in range(16) for x in range(16)]
        self.compiler.compile_sprite(Bitmap.from_buffer(16, 16, buffer))
        
        with self.assertRaises(PaletteOverflowError):
            self.compiler.compile_sprite(solid(8, 8, (255, 255, 255)))


class TestRGBATiles(unittest.TestCase):
    """Test cases for tiles in the alpha-aware pipeline."""
    
    def setUp(self):
        self.allocator = PaletteAllocator(PixelModel.RGBA)
        self.compiler = TileCompiler(self.allocator)
    
    def test_transparent_pixels_are_zero(self):
        buffer = [(0, 0, 0, 0)] + [(50, 60, 70, 255)] * 63
        tiles = self.compiler.compile_sprite(Bitmap.from_buffer(8, 8, buffer))
        
        self.assertEqual(len(tiles), 1)
        self.assertEqual(tiles[0][0], 0)
        self.assertEqual(tiles[0].count(1), 63)
    
    def test_partial_alpha_aborts(self):
        buffer = [(50, 60, 70, 255)] * 63 + [(50, 60, 70, 128)]
        with self.assertRaises(InvalidTransparencyError):
            self.compiler.compile_sprite(Bitmap.from_buffer(8, 8, buffer))


class TestTileGrid(unittest.TestCase):
    """Test cases for grid helpers."""
    
    def test_tile_grid(self):
        self.assertEqual(tile_grid(solid(24, 17, (0, 0, 0))), (3, 2))
    
    def test_truncated_dimensions(self):
        self.assertFalse(truncated_dimensions(solid(16, 8, (0, 0, 0))))
        self.assertTrue(truncated_dimensions(solid(16, 9, (0, 0, 0))))
        self.assertTrue(truncated_dimensions(solid(3, 8, (0, 0, 0))))


if __name__ == '__main__':
    unittest.main()
