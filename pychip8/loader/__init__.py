"""Loaders for CHIP-8 program images."""

from __future__ import annotations

from .program import RomImage
from .rom import RomFormatError, build_memory_image, load_rom, load_rom_from_path

__all__ = [
    "RomImage",
    "RomFormatError",
    "build_memory_image",
    "load_rom",
    "load_rom_from_path",
]
