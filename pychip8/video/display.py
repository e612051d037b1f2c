"""Monochrome 64x32 display buffer."""

from __future__ import annotations

from typing import Final, Sequence

WIDTH: Final[int] = 64
HEIGHT: Final[int] = 32


class DisplayBuffer:
    """Row-major grid of 1-bit pixels written by sprite XOR blits."""

    def __init__(self) -> None:
        self._pixels = bytearray(WIDTH * HEIGHT)

    def clear(self) -> None:
        self._pixels[:] = bytes(len(self._pixels))

    def get_pixel(self, x: int, y: int) -> int:
        return self._pixels[(y % HEIGHT) * WIDTH + (x % WIDTH)]

    def draw_sprite(self, x: int, y: int, rows: Sequence[int]) -> bool:
        """XOR ``rows`` onto the buffer with its top-left corner at (x, y).

        The origin is wrapped first, then every set bit wraps individually
        around both edges. Returns True if any lit pixel was turned off.
        """

        origin_x = x % WIDTH
        origin_y = y % HEIGHT
        collision = False
        for row, line in enumerate(rows):
            py = (origin_y + row) % HEIGHT
            for column in range(8):
                if not line & (0x80 >> column):
                    continue
                index = py * WIDTH + (origin_x + column) % WIDTH
                if self._pixels[index]:
                    collision = True
                self._pixels[index] ^= 1
        return collision

    def snapshot(self) -> tuple[int, ...]:
        return tuple(self._pixels)

    def lit_count(self) -> int:
        return sum(self._pixels)
