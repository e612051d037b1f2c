"""CHIP-8 interpreter with a pygame front end.

The interpreter core lives in :mod:`pychip8.cpu`; the remaining subpackages
provide memory, display, keypad, audio, ROM loading and the UI around it.
"""

from __future__ import annotations

from . import audio, bus, cpu, io, loader, system, ui, utils, video

__version__ = "0.1.0"

__all__: list[str] = [
    "cpu",
    "bus",
    "video",
    "audio",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
]
