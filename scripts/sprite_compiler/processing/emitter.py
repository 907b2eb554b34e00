"""
Serialization of compiled assets into constant-data source text.
"""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from jinja2 import Environment, FileSystemLoader

from ..errors import SchemaViolationError
from .assets import CompiledAssetSet
from .palette import RGB
from .tiles import TILE_PIXELS, Tile

OUTPUT_FORMATS = ("rust", "json")

RUST_TEMPLATE = "sprites.rs.j2"


@dataclass
class EmittedAssets:
    """Information content of serialized assets: 5-bit palette and named tiles."""
    palette: List[RGB] = field(default_factory=list)
    sprites: Dict[str, List[Tile]] = field(default_factory=dict)
    
    @classmethod
    def from_asset_set(cls, asset_set: CompiledAssetSet) -> "EmittedAssets":
        return cls(
            palette=asset_set.palette_block(),
            sprites=dict(asset_set.sprite_blocks())
        )


class SourceEmitter:
    """Renders a compiled asset set as Rust constants or JSON."""
    
    def __init__(self, output_format: str = "rust",
                 color_type: str = "::gba::mmio_types::Color",
                 palette_name: str = "PALETTE",
                 template_dir: Optional[Union[str, Path]] = None):
        """
        Initialize the emitter.
        
        Args:
            output_format: "rust" or "json"
            color_type: Fully qualified color type imported by the Rust output
            palette_name: Name of the palette constant
            template_dir: Directory containing Jinja2 templates
        """
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"output_format must be one of {OUTPUT_FORMATS}, got {output_format!r}")
        
        if template_dir is None:
            template_dir = Path(__file__).parent.parent / "templates"
        
        self.output_format = output_format
        self.color_type = color_type
        self.palette_name = palette_name
        self.template_dir = Path(template_dir)
        
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            autoescape=False
        )
        self._setup_template_filters()
    
    def _setup_template_filters(self) -> None:
        """Set up custom Jinja2 filters for template processing."""
        
        def type_name(path: str) -> str:
            """Last segment of a Rust type path."""
            return path.split("::")[-1]
        
        def format_path(path: Union[str, Path]) -> str:
            """Format file path for a Rust string literal."""
            return str(path).replace('\\', '/').replace('"', '\\"')
        
        def tile_literal(tile: Sequence[int]) -> str:
            return "[" + ", ".join(str(index) for index in tile) + "]"
        
        self.env.filters['type_name'] = type_name
        self.env.filters['format_path'] = format_path
        self.env.filters['tile_literal'] = tile_literal
    
    def render(self, asset_set: CompiledAssetSet, include_paths: Iterable[str] = ()) -> str:
        """
        Render an asset set.
        
        Args:
            asset_set: Compiled palette and sprites
            include_paths: Input paths to mark as read (Rust output only)
            
        Returns:
            Generated source text
        """
        emitted = EmittedAssets.from_asset_set(asset_set)
        if self.palette_name in emitted.sprites:
            raise SchemaViolationError(
                f"sprite name clashes with the palette constant {self.palette_name}",
                sprite=self.palette_name
            )
        
        if self.output_format == "json":
            return self._render_json(emitted)
        
        template = self.env.get_template(RUST_TEMPLATE)
        return template.render(
            include_paths=list(include_paths),
            color_type=self.color_type,
            palette_name=self.palette_name,
            palette=emitted.palette,
            sprites=list(emitted.sprites.items())
        )
    
    def _render_json(self, emitted: EmittedAssets) -> str:
        data = {
            "palette": [list(color) for color in emitted.palette],
            "sprites": {name: [list(tile) for tile in tiles] for name, tiles in emitted.sprites.items()}
        }
        return json.dumps(data, indent=2) + "\n"
    
    def parse(self, text: str) -> EmittedAssets:
        """
        Parse text produced by render() back into its palette and tiles.
        
        Raises:
            ValueError: If the text is not in the emitter's output format
        """
        if self.output_format == "json":
            return self._parse_json(text)
        return self._parse_rust(text)
    
    def _parse_json(self, text: str) -> EmittedAssets:
        data = json.loads(text)
        palette = [tuple(color) for color in data["palette"]]
        sprites = {name: [_check_tile(tile, name) for tile in tiles] for name, tiles in data["sprites"].items()}
        return EmittedAssets(palette=palette, sprites=sprites)
    
    def _parse_rust(self, text: str) -> EmittedAssets:
        palette_match = re.search(
            rf"pub const {re.escape(self.palette_name)}: &'static \[\w+\] = &\[(.*?)\];",
            text, re.DOTALL
        )
        if palette_match is None:
            raise ValueError(f"No {self.palette_name} constant found")
        
        palette = [
            (int(r), int(g), int(b))
            for r, g, b in re.findall(r"from_rgb\((\d+), (\d+), (\d+)\)", palette_match.group(1))
        ]
        
        sprites = {}
        for name, body in re.findall(r"pub const (\w+): &'static \[\[u8; 64\]\] = &\[(.*?)\];", text, re.DOTALL):
            sprites[name] = [
                _check_tile([int(v) for v in tile.split(",")], name)
                for tile in re.findall(r"\[([\d,\s]+)\]", body)
            ]
        
        return EmittedAssets(palette=palette, sprites=sprites)


def _check_tile(values: Sequence[int], name: str) -> Tile:
    if len(values) != TILE_PIXELS:
        raise ValueError(f"Tile in {name} has {len(values)} indices, expected {TILE_PIXELS}")
    return tuple(values)
