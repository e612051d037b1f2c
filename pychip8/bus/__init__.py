"""Bus-related helpers for the CHIP-8 interpreter."""

from .memory import MEMORY_SIZE, START_ADDRESS, Memory, MemoryError, mask12

__all__ = [
    "MEMORY_SIZE",
    "START_ADDRESS",
    "Memory",
    "MemoryError",
    "mask12",
]
