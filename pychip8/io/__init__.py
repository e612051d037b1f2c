"""Input helpers for the CHIP-8 interpreter."""

from .keypad import ALIAS_TABLE, KEY_MAP_TEMPLATE, Keypad

__all__ = [
    "ALIAS_TABLE",
    "KEY_MAP_TEMPLATE",
    "Keypad",
]
