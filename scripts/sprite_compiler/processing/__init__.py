"""
Compilation modules for bitmap extraction, palette allocation, tiling, aggregation and emission.
"""

from .bitmap import Bitmap, Rect, extract_rect
from .palette import PaletteAllocator, PixelModel
from .tiles import TileCompiler, TILE_SIZE
from .assets import CompiledAssetSet, SpriteSheetBuilder, compile_sprites
from .descriptor import load_descriptor, parse_descriptor
from .emitter import SourceEmitter, EmittedAssets

__all__ = [
    "Bitmap",
    "Rect",
    "extract_rect",
    "PaletteAllocator",
    "PixelModel",
    "TileCompiler",
    "TILE_SIZE",
    "CompiledAssetSet",
    "SpriteSheetBuilder",
    "compile_sprites",
    "load_descriptor",
    "parse_descriptor",
    "SourceEmitter",
    "EmittedAssets",
]
