"""
Configuration management system for the sprite compiler.
Supports TOML and JSON configuration files with validation.
"""

import os
import json
from dataclasses import dataclass, replace
from typing import Dict, List, Any, Union
from pathlib import Path

import toml

from .processing.emitter import OUTPUT_FORMATS
from .processing.palette import PixelModel

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

STRING_FIELDS = (
    "pixel_model", "descriptor_extension", "image_extension", "output_format",
    "color_type", "palette_name", "include_prefix", "log_level",
)


@dataclass
class CompilerConfig:
    """Main configuration class for the sprite compiler."""
    
    # Pipeline settings
    pixel_model: str = "rgb"
    descriptor_extension: str = ".yml"
    image_extension: str = ".png"
    
    # Output settings
    output_format: str = "rust"
    color_type: str = "::gba::mmio_types::Color"
    palette_name: str = "PALETTE"
    include_prefix: str = "../"
    
    # Logging
    log_level: str = "INFO"
    
    @property
    def model(self) -> PixelModel:
        """Pixel model enum for the configured pipeline variant."""
        return PixelModel(self.pixel_model)
    
    @classmethod
    def standalone(cls) -> "CompilerConfig":
        """Configuration for the standalone build step: opaque RGB, indices from 0."""
        return cls(pixel_model="rgb")
    
    @classmethod
    def inline(cls) -> "CompilerConfig":
        """Configuration for inline code generation: RGBA with transparent index 0, warnings only."""
        return cls(pixel_model="rgba", log_level="WARNING")
    
    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "CompilerConfig":
        """Load configuration from TOML or JSON file."""
        return cls._from_dict(cls._read_file(config_path))
    
    @staticmethod
    def _read_file(config_path: Union[str, Path]) -> Dict[str, Any]:
        """Read a TOML or JSON configuration file into a dictionary."""
        config_path = Path(config_path)
        
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        
        if config_path.suffix.lower() == '.toml':
            with open(config_path, 'r') as f:
                return toml.load(f)
        elif config_path.suffix.lower() == '.json':
            with open(config_path, 'r') as f:
                return json.load(f)
        else:
            raise ValueError(f"Unsupported configuration format: {config_path.suffix}")
    
    @classmethod
    def _from_dict(cls, data: Dict[str, Any], base: "CompilerConfig" = None) -> "CompilerConfig":
        """Create configuration from dictionary, starting from base or the defaults."""
        config_data = {}
        
        if 'pipeline' in data:
            pipeline = data['pipeline']
            for key in ('pixel_model', 'descriptor_extension', 'image_extension'):
                if key in pipeline:
                    config_data[key] = pipeline[key]
        
        if 'output' in data:
            output = data['output']
            if 'format' in output:
                config_data['output_format'] = output['format']
            for key in ('color_type', 'palette_name', 'include_prefix'):
                if key in output:
                    config_data[key] = output[key]
        
        if 'logging' in data:
            if 'level' in data['logging']:
                config_data['log_level'] = data['logging']['level']
        
        return replace(base or cls(), **config_data)
    
    def merged_with_file(self, config_path: Union[str, Path]) -> "CompilerConfig":
        """Overlay the settings of a configuration file onto this configuration."""
        return self._from_dict(self._read_file(config_path), base=self)
    
    @classmethod
    def default(cls, base: "CompilerConfig" = None) -> "CompilerConfig":
        """Create default (or preset) configuration with environment variable overrides."""
        return cls._apply_env_overrides(base or cls())
    
    @classmethod
    def from_env(cls) -> "CompilerConfig":
        """Create configuration from environment variables only."""
        return cls._apply_env_overrides(cls())
    
    @classmethod
    def _apply_env_overrides(cls, config: "CompilerConfig") -> "CompilerConfig":
        """Apply environment variable overrides to configuration."""
        for env_var, attr in ENV_OVERRIDES.items():
            value = os.getenv(env_var)
            if value:
                setattr(config, attr, value)
        return config
    
    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        # config files can carry any TOML/JSON type
        not_strings = [name for name in STRING_FIELDS if not isinstance(getattr(self, name), str)]
        if not_strings:
            return [f"{name} must be a string" for name in not_strings]

        if self.pixel_model not in [m.value for m in PixelModel]:
            errors.append("pixel_model must be rgb or rgba")
        
        if self.output_format not in OUTPUT_FORMATS:
            errors.append(f"output_format must be one of {', '.join(OUTPUT_FORMATS)}")
        
        for attr in ('descriptor_extension', 'image_extension'):
            if not getattr(self, attr).startswith('.'):
                errors.append(f"{attr} must start with '.'")
        
        if self.descriptor_extension == self.image_extension:
            errors.append("descriptor_extension and image_extension must differ")
        
        if not self.palette_name.isidentifier():
            errors.append("palette_name must be a valid identifier")
        
        if self.log_level.upper() not in LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        
        return errors


ENV_OVERRIDES = {
    'SPRITE_COMPILER_PIXEL_MODEL': 'pixel_model',
    'SPRITE_COMPILER_DESCRIPTOR_EXTENSION': 'descriptor_extension',
    'SPRITE_COMPILER_IMAGE_EXTENSION': 'image_extension',
    'SPRITE_COMPILER_OUTPUT_FORMAT': 'output_format',
    'SPRITE_COMPILER_COLOR_TYPE': 'color_type',
    'SPRITE_COMPILER_PALETTE_NAME': 'palette_name',
    'SPRITE_COMPILER_INCLUDE_PREFIX': 'include_prefix',
    'SPRITE_COMPILER_LOG_LEVEL': 'log_level',
}
