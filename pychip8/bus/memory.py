"""Flat 4 KiB memory store for the CHIP-8 interpreter.

The store always starts life with the hexadecimal font copied to address
``0x000``. ``load_image`` replaces the whole store verbatim, so callers that
want to keep the font must include it in the image they pass in (see
``pychip8.loader.build_memory_image``).
"""

from __future__ import annotations

from typing import Final

from pychip8.video.font import FONT_GLYPHS, FONT_START

MEMORY_SIZE: Final[int] = 4096
START_ADDRESS: Final[int] = 0x200


def mask12(value: int) -> int:
    """Clamp ``value`` to the 12-bit address space."""

    return value & 0x0FFF


class MemoryError(Exception):
    """Raised when the memory store is used incorrectly."""


class Memory:
    """Byte-addressable 4096 byte store."""

    def __init__(self) -> None:
        self._data = bytearray(MEMORY_SIZE)
        self.seed_font()

    def __len__(self) -> int:
        return MEMORY_SIZE

    def load8(self, address: int) -> int:
        return self._data[mask12(address)]

    def store8(self, address: int, value: int) -> None:
        self._data[mask12(address)] = value & 0xFF

    def load16(self, address: int) -> int:
        high = self.load8(address)
        low = self.load8(address + 1)
        return (high << 8) | low

    def store16(self, address: int, value: int) -> None:
        self.store8(address, (value >> 8) & 0xFF)
        self.store8(address + 1, value & 0xFF)

    def load_block(self, address: int, length: int) -> bytes:
        return bytes(self.load8(address + offset) for offset in range(length))

    def store_block(self, address: int, data: bytes) -> None:
        for offset, value in enumerate(data):
            self.store8(address + offset, value)

    def load_image(self, image: bytes) -> None:
        """Replace the entire store with ``image`` (exactly 4096 bytes)."""

        if len(image) != MEMORY_SIZE:
            raise MemoryError(f"memory image must be {MEMORY_SIZE} bytes, got {len(image)}")
        self._data[:] = image

    def seed_font(self) -> None:
        self._data[FONT_START : FONT_START + len(FONT_GLYPHS)] = FONT_GLYPHS

    def clear(self) -> None:
        """Zero the store and copy the font back in."""

        self._data[:] = bytes(MEMORY_SIZE)
        self.seed_font()

    def snapshot(self) -> bytes:
        return bytes(self._data)
