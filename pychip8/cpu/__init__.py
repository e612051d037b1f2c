"""CPU package for the CHIP-8 interpreter."""

from .core import (
    Chip8,
    CPUError,
    CPUState,
    IllegalOpcodeError,
    RunState,
    StackOverflowError,
    StackUnderflowError,
)
from . import opcodes

__all__ = [
    "Chip8",
    "CPUState",
    "CPUError",
    "IllegalOpcodeError",
    "RunState",
    "StackOverflowError",
    "StackUnderflowError",
    "opcodes",
]
