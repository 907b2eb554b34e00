"""
Discovery of sprite sheets: descriptor files paired with same-named images.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from .errors import MissingPairedImageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpriteSheetSource:
    """A descriptor file and the image it describes."""
    descriptor_path: Path
    image_path: Path


def discover_sprite_sheets(assets_dir: Union[str, Path],
                           descriptor_extension: str = ".yml",
                           image_extension: str = ".png") -> List[SpriteSheetSource]:
    """
    Recursively find descriptor files and their paired images.
    
    Args:
        assets_dir: Directory to search
        descriptor_extension: Extension identifying descriptor files
        image_extension: Extension of the paired image files
        
    Returns:
        Sprite sheet sources sorted by descriptor path
        
    Raises:
        FileNotFoundError: If assets_dir is not a directory
        MissingPairedImageError: If a descriptor has no image next to it
    """
    assets_dir = Path(assets_dir)
    if not assets_dir.is_dir():
        raise FileNotFoundError(f"Assets directory not found: {assets_dir}")
    
    sources = []
    for descriptor_path in sorted(assets_dir.rglob(f"*{descriptor_extension}")):
        if descriptor_path.is_dir():
            continue
        
        image_path = descriptor_path.with_suffix(image_extension)
        if not image_path.is_file():
            raise MissingPairedImageError(str(descriptor_path), str(image_path))
        
        sources.append(SpriteSheetSource(descriptor_path, image_path))
    
    logger.info(f"Found {len(sources)} sprite sheets in {assets_dir}")
    return sources
