"""
Sprite sheet descriptor loading.

A descriptor is a YAML file naming the sprites in the image next to it:

    sprites:
      hero:
        rect: [0, 0, 16, 16]
      coin:
        rect: [16, 0, 8, 8]
"""

import re
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ..errors import SchemaViolationError
from .bitmap import Rect

DESCRIPTOR_KEYS = {"sprites"}
SPRITE_KEYS = {"rect"}

# names become constants once upper-cased
SPRITE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def load_descriptor(path: Union[str, Path]) -> Dict[str, Rect]:
    """
    Load a descriptor file.
    
    Args:
        path: Path to the YAML descriptor
        
    Returns:
        Mapping of sprite name to rectangle, in file order
        
    Raises:
        SchemaViolationError: If the file cannot be read as UTF-8 text, is not
            valid YAML or breaks the schema
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    except (UnicodeDecodeError, OSError) as e:
        raise SchemaViolationError(f"cannot read descriptor: {e}", path=str(path))
    return parse_descriptor(text, str(path))


def parse_descriptor(text: str, path: Optional[str] = None) -> Dict[str, Rect]:
    """Parse descriptor YAML text into a mapping of sprite name to rectangle."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SchemaViolationError(f"invalid YAML: {e}", path=path)
    
    if not isinstance(data, dict):
        raise SchemaViolationError("descriptor must be a mapping with a 'sprites' key", path=path)
    
    _reject_unknown_keys(data, DESCRIPTOR_KEYS, "descriptor", path)
    if "sprites" not in data:
        raise SchemaViolationError("missing field 'sprites'", path=path)
    
    sprites = data["sprites"]
    if not isinstance(sprites, dict):
        raise SchemaViolationError("'sprites' must be a mapping of name to sprite", path=path)
    
    result = {}
    for name, sprite in sprites.items():
        if not isinstance(name, str) or not SPRITE_NAME_PATTERN.match(name):
            raise SchemaViolationError(
                f"sprite name {name!r} must start with a letter or underscore and contain "
                f"only letters, digits and underscores",
                path=path
            )
        result[name] = _parse_sprite(sprite, name, path)
    
    return result


def _parse_sprite(sprite: Any, name: str, path: Optional[str]) -> Rect:
    if not isinstance(sprite, dict):
        raise SchemaViolationError("sprite must be a mapping with a 'rect' key", path=path, sprite=name)
    
    _reject_unknown_keys(sprite, SPRITE_KEYS, "sprite", path, name)
    if "rect" not in sprite:
        raise SchemaViolationError("missing field 'rect'", path=path, sprite=name)
    
    rect = sprite["rect"]
    if not isinstance(rect, (list, tuple)) or len(rect) != 4:
        raise SchemaViolationError(f"'rect' must be a list of 4 integers [x, y, w, h], got {rect!r}",
                                   path=path, sprite=name)
    
    for value in rect:
        # bool is an int subclass, but `true` is not a coordinate
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise SchemaViolationError(f"'rect' values must be non-negative integers, got {rect!r}",
                                       path=path, sprite=name)
    
    return Rect(*rect)


def _reject_unknown_keys(data: Dict[Any, Any], allowed: set, what: str,
                         path: Optional[str], sprite: Optional[str] = None) -> None:
    unknown = [key for key in data if key not in allowed]
    if unknown:
        raise SchemaViolationError(
            f"unknown field(s) in {what}: {', '.join(repr(k) for k in unknown)}; "
            f"expected {', '.join(sorted(allowed))}",
            path=path, sprite=sprite
        )
