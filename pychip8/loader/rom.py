"""Raw ROM loader for CHIP-8 programs.

ROM files carry no header; their bytes are copied verbatim to the program
start address of a fresh memory image that already holds the font.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Protocol

from pychip8.bus import MEMORY_SIZE, START_ADDRESS
from pychip8.utils import debug_enabled, debug_log
from pychip8.video.font import FONT_GLYPHS, FONT_START

from .program import RomImage


class RomFormatError(RuntimeError):
    """Raised when a ROM cannot be placed into memory."""


class MemoryImageTarget(Protocol):
    def load_into_memory(self, image: bytes) -> None:  # pragma: no cover - protocol
        ...


def build_memory_image(rom: bytes, start: int = START_ADDRESS) -> bytes:
    """Return a 4096 byte image with the font at 0x000 and ``rom`` at ``start``."""

    if not rom:
        raise RomFormatError("ROM image is empty")
    if start < FONT_START + len(FONT_GLYPHS) or start >= MEMORY_SIZE:
        raise RomFormatError(f"start address {start:#05x} overlaps the font or lies outside memory")
    capacity = MEMORY_SIZE - start
    if len(rom) > capacity:
        raise RomFormatError(f"ROM is {len(rom)} bytes; at most {capacity} fit from {start:#05x}")

    image = bytearray(MEMORY_SIZE)
    image[FONT_START : FONT_START + len(FONT_GLYPHS)] = FONT_GLYPHS
    image[start : start + len(rom)] = rom
    return bytes(image)


def load_rom(stream: BinaryIO, target: MemoryImageTarget, *, name: str = "", start: int = START_ADDRESS) -> RomImage:
    """Read a ROM from ``stream`` and hand the resulting image to ``target``."""

    payload = stream.read()
    image = build_memory_image(payload, start)
    target.load_into_memory(image)
    if debug_enabled("loader"):
        debug_log("loader", "rom=%s start=%03x length=%d", name or "<stream>", start, len(payload))
    return RomImage(name=name, start=start, length=len(payload))


def load_rom_from_path(path: Path, target: MemoryImageTarget, *, start: int = START_ADDRESS) -> RomImage:
    """Load a ROM from the filesystem."""

    with path.open("rb") as handle:
        return load_rom(handle, target, name=path.name, start=start)
