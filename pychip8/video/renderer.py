"""Convert display buffer snapshots into scaled RGB frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .display import HEIGHT, WIDTH
from .palette import MONOCHROME, RGBColor, validate_palette


@dataclass
class RenderResult:
    """Packed RGB frame produced by :class:`Renderer`."""

    width: int
    height: int
    pixels: bytes

    def get_pixel(self, x: int, y: int) -> RGBColor:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} frame")
        offset = (y * self.width + x) * 3
        return (self.pixels[offset], self.pixels[offset + 1], self.pixels[offset + 2])

    def to_surface(self):
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build surfaces") from exc
        return pygame.image.frombuffer(self.pixels, (self.width, self.height), "RGB")


class Renderer:
    """Scale a 64x32 1-bit snapshot into an RGB frame."""

    def __init__(self, palette: Sequence[RGBColor] = MONOCHROME) -> None:
        self._background, self._foreground = validate_palette(palette)

    def render(self, display: Sequence[int], *, scale: int = 1) -> RenderResult:
        if scale <= 0:
            raise ValueError("scale must be positive")
        if len(display) != WIDTH * HEIGHT:
            raise ValueError(f"display snapshot must hold {WIDTH * HEIGHT} pixels")

        background = bytes(self._background)
        foreground = bytes(self._foreground)
        width = WIDTH * scale
        buffer = bytearray()
        for y in range(HEIGHT):
            row = bytearray()
            for x in range(WIDTH):
                colour = foreground if display[y * WIDTH + x] else background
                row += colour * scale
            buffer += bytes(row) * scale
        return RenderResult(width=width, height=HEIGHT * scale, pixels=bytes(buffer))
