"""
Exception hierarchy for the sprite compiler.
Every error aborts the whole compilation run.
"""

from typing import Optional, Tuple


class SpriteCompilerError(Exception):
    """Base exception for sprite compiler errors."""
    
    def __init__(self, message: str, path: Optional[str] = None, sprite: Optional[str] = None):
        super().__init__(message)
        self.path = path
        self.sprite = sprite
    
    def with_context(self, path: Optional[str] = None, sprite: Optional[str] = None) -> "SpriteCompilerError":
        """Attach missing path/sprite context and return self for re-raising."""
        if self.path is None and path is not None:
            self.path = path
        if self.sprite is None and sprite is not None:
            self.sprite = sprite
        return self
    
    def __str__(self) -> str:
        message = super().__str__()
        context = []
        if self.sprite is not None:
            context.append(f"sprite '{self.sprite}'")
        if self.path is not None:
            context.append(f"in {self.path}")
        if context:
            return f"{message} ({' '.join(context)})"
        return message


class MissingPairedImageError(SpriteCompilerError):
    """Exception raised when a descriptor file has no matching image."""
    
    def __init__(self, descriptor_path: str, image_path: str):
        super().__init__(f"No paired image found, expected {image_path}", path=descriptor_path)
        self.image_path = image_path


class SchemaViolationError(SpriteCompilerError):
    """Exception raised when a descriptor does not match the expected schema."""
    
    def __init__(self, message: str, path: Optional[str] = None, sprite: Optional[str] = None):
        super().__init__(f"Schema violation: {message}", path=path, sprite=sprite)


class RectOutOfBoundsError(SpriteCompilerError):
    """Exception raised when a rectangle exceeds the source bitmap."""
    
    def __init__(self, rect: Tuple[int, int, int, int], source_size: Tuple[int, int],
                 sprite: Optional[str] = None):
        x, y, w, h = rect
        super().__init__(
            f"Rect (x={x}, y={y}, w={w}, h={h}) exceeds source bitmap of "
            f"{source_size[0]}×{source_size[1]}",
            sprite=sprite
        )
        self.rect = rect
        self.source_size = source_size


class InvalidTransparencyError(SpriteCompilerError):
    """Exception raised for partially transparent pixels."""
    
    def __init__(self, pixel: Tuple[int, ...], sprite: Optional[str] = None):
        super().__init__(
            f"Pixel {pixel} has alpha {pixel[3]}; only fully transparent (0) "
            f"or fully opaque (255) pixels are supported",
            sprite=sprite
        )
        self.pixel = pixel


class PaletteOverflowError(SpriteCompilerError):
    """Exception raised when the palette runs out of indices."""
    
    def __init__(self, palette_size: int, capacity: int, sprite: Optional[str] = None):
        super().__init__(
            f"Too many colors to fit into a single palette: more than {capacity} distinct colors "
            f"(palette holds {palette_size}/{capacity})",
            sprite=sprite
        )
        self.palette_size = palette_size
        self.capacity = capacity


class DecodeFailureError(SpriteCompilerError):
    """Exception raised when an image file cannot be decoded."""
    
    def __init__(self, image_path: str, cause: Exception):
        super().__init__(f"Cannot decode image: {cause}", path=image_path)
        self.cause = cause
