"""
Aggregation of compiled sprites and the shared palette.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ..errors import SpriteCompilerError
from .bitmap import Bitmap, Rect, extract_rect
from .palette import MAX_INDEX, PaletteAllocator, PixelModel, RGB
from .tiles import Tile, TileCompiler

logger = logging.getLogger(__name__)

COLOR_SHIFT = 3


def to_15bit(color: RGB) -> RGB:
    """Truncate an 8-bit-per-channel color to 5 bits per channel."""
    return (color[0] >> COLOR_SHIFT, color[1] >> COLOR_SHIFT, color[2] >> COLOR_SHIFT)


class CompiledAssetSet:
    """The palette plus every compiled sprite of one compilation run."""
    
    def __init__(self, allocator: PaletteAllocator):
        self.allocator = allocator
        self.sprites: Dict[str, List[Tile]] = {}
    
    @property
    def pixel_model(self) -> PixelModel:
        return self.allocator.pixel_model
    
    def add_sprite(self, name: str, tiles: List[Tile]) -> None:
        """Insert or overwrite the tiles for a sprite."""
        self.sprites[name] = tiles
    
    def palette_block(self) -> List[RGB]:
        """
        Get the palette as 5-bit colors in index order.
        
        Runs from index 0 through the highest assigned index. Slots without a
        color (including the reserved transparent slot) are black.
        """
        assigned = dict(self.allocator.colors())
        highest = self.allocator.highest_index()
        if highest is None:
            return []
        
        return [to_15bit(assigned.get(index, (0, 0, 0))) for index in range(min(highest, MAX_INDEX) + 1)]
    
    def sprite_blocks(self) -> List[Tuple[str, List[Tile]]]:
        """Get (upper-cased name, tiles) pairs in insertion order."""
        return [(name.upper(), tiles) for name, tiles in self.sprites.items()]
    
    @property
    def tile_count(self) -> int:
        return sum(len(tiles) for tiles in self.sprites.values())
    
    def __len__(self) -> int:
        return len(self.sprites)


class SpriteSheetBuilder:
    """
    Collects named sprite bitmaps from sprite sheets and compiles them.
    
    Sprites keep the order in which they were added. Adding a name that is
    already present replaces the earlier bitmap and moves the sprite to the end.
    """
    
    def __init__(self, pixel_model: PixelModel = PixelModel.RGB):
        self.pixel_model = pixel_model
        self._sprites: Dict[str, Bitmap] = {}
    
    def add(self, sprites: Mapping[str, Rect], sheet: Bitmap, path: Optional[str] = None) -> None:
        """
        Extract each named rectangle from a sprite sheet.
        
        Args:
            sprites: Mapping of sprite name to rectangle
            sheet: Decoded sprite sheet
            path: Sheet path, used for error context
        """
        if sheet.channels != self.pixel_model.channels:
            raise ValueError(
                f"Sheet has {sheet.channels} channels but the {self.pixel_model.value} "
                f"pipeline expects {self.pixel_model.channels}"
            )
        
        for name, rect in sprites.items():
            try:
                bitmap = extract_rect(sheet, rect)
            except SpriteCompilerError as e:
                raise e.with_context(path=path, sprite=name)
            
            # names are emitted upper-cased, so "Hero" and "HERO" are the same sprite
            for existing in [n for n in self._sprites if n.upper() == name.upper()]:
                logger.info(f"Sprite '{existing}' redefined as '{name}'{f' in {path}' if path else ''}; keeping the latest")
                del self._sprites[existing]
            self._sprites[name] = bitmap
    
    def names(self) -> List[str]:
        return list(self._sprites)
    
    def __len__(self) -> int:
        return len(self._sprites)
    
    def compile(self) -> CompiledAssetSet:
        """
        Compile every collected sprite into a single asset set.
        
        Raises:
            SpriteCompilerError: If any sprite fails; no partial result is returned
        """
        compiled = CompiledAssetSet(PaletteAllocator(self.pixel_model))
        tile_compiler = TileCompiler(compiled.allocator)
        
        for name, bitmap in self._sprites.items():
            try:
                tiles = tile_compiler.compile_sprite(bitmap, name)
            except SpriteCompilerError as e:
                raise e.with_context(sprite=name)
            compiled.add_sprite(name, tiles)
        
        logger.info(
            f"Compiled {len(compiled)} sprites into {compiled.tile_count} tiles "
            f"using {len(compiled.allocator)}/{compiled.allocator.capacity} palette colors"
        )
        return compiled


def compile_sprites(sheets: Iterable[Tuple[Mapping[str, Rect], Bitmap]],
                    pixel_model: PixelModel = PixelModel.RGB) -> CompiledAssetSet:
    """Compile (sprites, sheet) pairs in order into one asset set."""
    builder = SpriteSheetBuilder(pixel_model)
    for sprites, sheet in sheets:
        builder.add(sprites, sheet)
    return builder.compile()
