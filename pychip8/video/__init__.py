"""Video helpers for the CHIP-8 interpreter."""

from __future__ import annotations

from .display import HEIGHT, WIDTH, DisplayBuffer
from .font import FONT_GLYPHS, GLYPH_BYTES, glyph_address
from .palette import COSMAC, MONOCHROME, validate_palette
from .renderer import RenderResult, Renderer

__all__ = [
    "DisplayBuffer",
    "Renderer",
    "RenderResult",
    "MONOCHROME",
    "COSMAC",
    "validate_palette",
    "FONT_GLYPHS",
    "GLYPH_BYTES",
    "glyph_address",
    "WIDTH",
    "HEIGHT",
]
