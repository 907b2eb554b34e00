"""
Sprite compiler coordinator.
Runs discovery, decoding, extraction, tile compilation and emission as one
all-or-nothing pass.
"""

import time
import logging
from pathlib import Path
from typing import List, Optional, Union
from dataclasses import dataclass, field

from .config import CompilerConfig
from .discovery import discover_sprite_sheets
from .processing.assets import CompiledAssetSet, SpriteSheetBuilder
from .processing.descriptor import load_descriptor
from .processing.emitter import SourceEmitter
from .utils.image import ImageUtils


@dataclass
class CompileResult:
    """Result of a compilation run."""
    source: str
    asset_set: CompiledAssetSet
    consumed_paths: List[Path] = field(default_factory=list)
    duration: float = 0.0
    
    @property
    def sprite_count(self) -> int:
        return len(self.asset_set)
    
    @property
    def palette_size(self) -> int:
        return len(self.asset_set.allocator)


class SpriteCompiler:
    """
    Compiles a directory of sprite sheets into palette and tile constants.
    
    Either the whole directory compiles and source text is returned, or a
    SpriteCompilerError is raised and nothing is produced.
    """
    
    def __init__(self, config: Optional[CompilerConfig] = None):
        """
        Initialize the compiler.
        
        Args:
            config: Compiler configuration, defaults to the standalone preset
        """
        self.config = config or CompilerConfig.standalone()
        self.logger = self._setup_logging()
        self.emitter = SourceEmitter(
            output_format=self.config.output_format,
            color_type=self.config.color_type,
            palette_name=self.config.palette_name
        )
    
    def _setup_logging(self) -> logging.Logger:
        """Set up logging for the compiler."""
        logger = logging.getLogger("sprite_compiler")
        logger.setLevel(self.config.log_level.upper())
        
        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)
        
        return logger
    
    def compile_directory(self, assets_dir: Union[str, Path], mark_includes: bool = False) -> CompileResult:
        """
        Compile every sprite sheet under a directory.
        
        Args:
            assets_dir: Directory searched recursively for descriptor files
            mark_includes: Prefix the output with one include marker per input file read
            
        Returns:
            CompileResult with the generated source
            
        Raises:
            SpriteCompilerError: If any descriptor or image fails to compile
        """
        start_time = time.time()
        model = self.config.model
        self.logger.info(f"Compiling sprites in {assets_dir} ({model.value} pipeline)")
        
        builder = SpriteSheetBuilder(model)
        consumed: List[Path] = []
        
        sources = discover_sprite_sheets(
            assets_dir,
            descriptor_extension=self.config.descriptor_extension,
            image_extension=self.config.image_extension
        )
        
        for source in sources:
            consumed.append(source.descriptor_path)
            consumed.append(source.image_path)
            
            sprites = load_descriptor(source.descriptor_path)
            sheet = ImageUtils.decode_file(source.image_path, model)
            self.logger.debug(f"{source.image_path}: {sheet.width}×{sheet.height}, {len(sprites)} sprites")
            builder.add(sprites, sheet, path=str(source.image_path))
        
        asset_set = builder.compile()
        
        include_paths = [self.include_path(p) for p in consumed] if mark_includes else []
        source_text = self.emitter.render(asset_set, include_paths=include_paths)
        
        duration = time.time() - start_time
        self.logger.info(f"Compiled {len(asset_set)} sprites in {duration:.2f}s")
        
        return CompileResult(
            source=source_text,
            asset_set=asset_set,
            consumed_paths=consumed,
            duration=duration
        )
    
    def compile_to_file(self, assets_dir: Union[str, Path], out_file: Union[str, Path]) -> CompileResult:
        """
        Compile a directory and write the source to a file.
        
        The file is only written once compilation has fully succeeded.
        """
        result = self.compile_directory(assets_dir)
        
        out_file = Path(out_file)
        out_file.parent.mkdir(parents=True, exist_ok=True)
        with open(out_file, 'w', encoding='utf-8') as f:
            f.write(result.source)
        
        self.logger.info(f"Wrote {out_file}")
        return result
    
    def compile_inline(self, assets_dir: Union[str, Path]) -> CompileResult:
        """Compile a directory into source text for embedding, with include markers."""
        return self.compile_directory(assets_dir, mark_includes=True)
    
    def include_path(self, path: Path) -> str:
        """Path of an input file as referenced by an include marker."""
        return f"{self.config.include_prefix}{Path(path).as_posix()}"


def compile_assets(assets_dir: Union[str, Path], config: Optional[CompilerConfig] = None) -> str:
    """Compile a directory of sprite sheets and return the generated source."""
    return SpriteCompiler(config).compile_directory(assets_dir).source

