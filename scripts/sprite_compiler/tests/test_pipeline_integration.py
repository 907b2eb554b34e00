"""
Integration tests for the sprite compiler pipeline.
Compiles real PNG and YAML files from a temporary assets directory.
"""

import tempfile
import shutil
from pathlib import Path
import pytest
from PIL import Image

from ..config import CompilerConfig
from ..pipeline import SpriteCompiler, compile_assets
from ..processing.emitter import EmittedAssets, SourceEmitter
from ..errors import (
    DecodeFailureError,
    InvalidTransparencyError,
    MissingPairedImageError,
    PaletteOverflowError,
    RectOutOfBoundsError,
    SchemaViolationError,
)


def write_sheet(directory: Path, name: str, image: Image.Image, sprites: dict) -> None:
    """Write name.png and a name.yml describing the given sprite rects."""
    directory.mkdir(parents=True, exist_ok=True)
    image.save(directory / f"{name}.png")
    
    lines = ["sprites:"]
    for sprite, rect in sprites.items():
        lines.append(f"  {sprite}:")
        lines.append(f"    rect: [{', '.join(str(v) for v in rect)}]")
    (directory / f"{name}.yml").write_text("\n".join(lines) + "\n")


class TestPipelineIntegration:
    """Test the complete directory-to-source pipeline."""
    
    def setup_method(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.assets_dir = self.temp_dir / "assets"
    
    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)
    
    def create_character_sheet(self, mode: str = "RGB") -> Image.Image:
        """32×16 sheet: red left half, green right half, blue bottom-right 8×8."""
        background = (255, 0, 0, 255) if mode == "RGBA" else (255, 0, 0)
        image = Image.new(mode, (32, 16), background)
        pixels = image.load()
        for y in range(16):
            for x in range(16, 32):
                pixels[x, y] = (0, 255, 0, 255) if mode == "RGBA" else (0, 255, 0)
        for y in range(8, 16):
            for x in range(24, 32):
                pixels[x, y] = (0, 0, 255, 255) if mode == "RGBA" else (0, 0, 255)
        return image
    
    def test_compile_rgb_directory(self):
        write_sheet(self.assets_dir, "hero", self.create_character_sheet(),
                    {"hero": [0, 0, 16, 16], "slime": [16, 0, 16, 16]})
        
        result = SpriteCompiler(CompilerConfig.standalone()).compile_directory(self.assets_dir)
        
        assert result.sprite_count == 2
        assert result.palette_size == 3
        assert result.asset_set.sprites["hero"] == [(0,) * 64] * 4
        assert result.asset_set.sprites["slime"] == [(1,) * 64, (1,) * 64, (1,) * 64, (2,) * 64]
        assert "pub const HERO: &'static [[u8; 64]]" in result.source
        assert "include_bytes!" not in result.source
    
    def test_consumed_paths_in_order(self):
        write_sheet(self.assets_dir / "b", "items", Image.new("RGB", (8, 8)), {"key": [0, 0, 8, 8]})
        write_sheet(self.assets_dir / "a", "tiles", Image.new("RGB", (8, 8)), {"grass": [0, 0, 8, 8]})
        
        result = SpriteCompiler().compile_directory(self.assets_dir)
        
        assert [p.relative_to(self.assets_dir).as_posix() for p in result.consumed_paths] == [
            "a/tiles.yml", "a/tiles.png", "b/items.yml", "b/items.png"
        ]
        assert list(result.asset_set.sprites) == ["grass", "key"]
    
    def test_compile_inline_rgba(self):
        image = Image.new("RGBA", (8, 8), (100, 150, 200, 255))
        image.putpixel((0, 0), (0, 0, 0, 0))
        write_sheet(self.assets_dir, "ghost", image, {"ghost": [0, 0, 8, 8]})
        
        compiler = SpriteCompiler(CompilerConfig.inline())
        result = compiler.compile_inline(self.assets_dir)
        
        lines = result.source.splitlines()
        assert lines[0] == f'const _: &[u8] = include_bytes!("../{(self.assets_dir / "ghost.yml").as_posix()}");'
        assert lines[1] == f'const _: &[u8] = include_bytes!("../{(self.assets_dir / "ghost.png").as_posix()}");'
        
        tile = result.asset_set.sprites["ghost"][0]
        assert tile.count(0) == 1 and tile.count(1) == 63
        assert result.asset_set.palette_block() == [(0, 0, 0), (12, 18, 25)]
    
    def test_compile_to_file(self):
        write_sheet(self.assets_dir, "hero", self.create_character_sheet(), {"hero": [0, 0, 16, 16]})
        out_file = self.temp_dir / "out" / "sprites.rs"
        
        result = SpriteCompiler().compile_to_file(self.assets_dir, out_file)
        
        assert out_file.read_text() == result.source
        assert SourceEmitter().parse(out_file.read_text()) == EmittedAssets.from_asset_set(result.asset_set)
    
    def test_failure_writes_nothing(self):
        write_sheet(self.assets_dir, "hero", self.create_character_sheet(), {"hero": [0, 0, 64, 64]})
        out_file = self.temp_dir / "sprites.rs"
        
        with pytest.raises(RectOutOfBoundsError) as exc_info:
            SpriteCompiler().compile_to_file(self.assets_dir, out_file)
        
        assert exc_info.value.sprite == "hero"
        assert exc_info.value.path == str(self.assets_dir / "hero.png")
        assert not out_file.exists()
    
    def test_json_output(self):
        write_sheet(self.assets_dir, "hero", self.create_character_sheet(), {"hero": [0, 0, 8, 8]})
        config = CompilerConfig(output_format="json")
        
        source = compile_assets(self.assets_dir, config)
        
        assert SourceEmitter(output_format="json").parse(source).sprites == {"HERO": [(0,) * 64]}
    
    def test_byte_identical_output(self):
        write_sheet(self.assets_dir, "one", self.create_character_sheet(), {"a": [0, 0, 16, 8], "b": [16, 8, 16, 8]})
        write_sheet(self.assets_dir / "more", "two", self.create_character_sheet(), {"c": [8, 0, 24, 16]})
        
        assert compile_assets(self.assets_dir) == compile_assets(self.assets_dir)
    
    def test_palette_overflow(self):
        image = Image.new("RGB", (8, 40))
        for i in range(257):
            image.putpixel((i % 8, i // 8), (i % 256, i // 256, 9))
        write_sheet(self.assets_dir, "rainbow", image, {"rainbow": [0, 0, 8, 40]})
        
        with pytest.raises(PaletteOverflowError) as exc_info:
            compile_assets(self.assets_dir)
        
        assert exc_info.value.capacity == 256
        assert exc_info.value.sprite == "rainbow"
    
    def test_invalid_transparency(self):
        image = Image.new("RGBA", (8, 8), (10, 10, 10, 128))
        write_sheet(self.assets_dir, "smoke", image, {"smoke": [0, 0, 8, 8]})
        
        with pytest.raises(InvalidTransparencyError):
            SpriteCompiler(CompilerConfig.inline()).compile_inline(self.assets_dir)
    
    def test_missing_image(self):
        self.assets_dir.mkdir()
        (self.assets_dir / "hero.yml").write_text("sprites: {}\n")
        
        with pytest.raises(MissingPairedImageError):
            compile_assets(self.assets_dir)
    
    def test_schema_violation(self):
        write_sheet(self.assets_dir, "hero", Image.new("RGB", (8, 8)), {"hero": [0, 0, 8, 8]})
        (self.assets_dir / "hero.yml").write_text("sprites:\n  hero:\n    rect: [0, 0, 8, 8]\n    fps: 12\n")
        
        with pytest.raises(SchemaViolationError):
            compile_assets(self.assets_dir)
    
    def test_decode_failure(self):
        self.assets_dir.mkdir()
        (self.assets_dir / "hero.yml").write_text("sprites: {}\n")
        (self.assets_dir / "hero.png").write_bytes(b"\x89PNG garbage")
        
        with pytest.raises(DecodeFailureError):
            compile_assets(self.assets_dir)
    
    def test_truncation_warning(self, caplog):
        write_sheet(self.assets_dir, "odd", Image.new("RGB", (12, 10)), {"odd": [0, 0, 12, 10]})
        
        with caplog.at_level("WARNING"):
            result = SpriteCompiler().compile_directory(self.assets_dir)
        
        assert len(result.asset_set.sprites["odd"]) == 1
        assert any("not a multiple of 8" in record.getMessage() for record in caplog.records)
    
    def test_empty_directory(self):
        self.assets_dir.mkdir()
        
        result = SpriteCompiler().compile_directory(self.assets_dir)
        
        assert result.sprite_count == 0
        assert "pub const PALETTE: &'static [Color] = &[\n];" in result.source
