"""Audio output for the CHIP-8 sound timer."""

from .beeper import DEFAULT_FREQUENCY, SquareWaveBeeper

__all__ = ["DEFAULT_FREQUENCY", "SquareWaveBeeper"]
