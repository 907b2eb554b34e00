"""
Sprite Compiler

Offline asset compiler that turns sprite sheets and rectangle descriptors into
a shared indexed-color palette and 8×8 tiles of palette indices, emitted as
constant data for a 15-bit-color renderer.
"""

__version__ = "0.1.0"

from .config import CompilerConfig
from .errors import (
    SpriteCompilerError,
    MissingPairedImageError,
    SchemaViolationError,
    RectOutOfBoundsError,
    InvalidTransparencyError,
    PaletteOverflowError,
    DecodeFailureError,
)
from .processing.bitmap import Bitmap, Rect, extract_rect
from .processing.palette import PaletteAllocator, PixelModel
from .processing.tiles import TileCompiler
from .processing.assets import CompiledAssetSet, SpriteSheetBuilder
from .processing.emitter import SourceEmitter, EmittedAssets
from .pipeline import SpriteCompiler, CompileResult, compile_assets

__all__ = [
    "CompilerConfig",
    "SpriteCompilerError",
    "MissingPairedImageError",
    "SchemaViolationError",
    "RectOutOfBoundsError",
    "InvalidTransparencyError",
    "PaletteOverflowError",
    "DecodeFailureError",
    "Bitmap",
    "Rect",
    "extract_rect",
    "PaletteAllocator",
    "PixelModel",
    "TileCompiler",
    "CompiledAssetSet",
    "SpriteSheetBuilder",
    "SourceEmitter",
    "EmittedAssets",
    "SpriteCompiler",
    "CompileResult",
    "compile_assets",
]
