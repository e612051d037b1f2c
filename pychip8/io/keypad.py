"""Hexadecimal keypad state and host key mapping."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping

from pychip8.utils import debug_enabled, debug_log


# COSMAC VIP layout folded onto the left side of a QWERTY keyboard:
#   1 2 3 C      1 2 3 4
#   4 5 6 D  ->  q w e r
#   7 8 9 E      a s d f
#   A 0 B F      z x c v
KEY_MAP_TEMPLATE: Mapping[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


# Most programs steer with 2/4/6/8.
ALIAS_TABLE: Mapping[str, str] = {
    "up": "2",
    "left": "q",
    "right": "e",
    "down": "s",
    "space": "w",
}


@dataclass
class Keypad:
    """Sixteen-key pad fed by host key names."""

    _keys: list[bool] = field(default_factory=lambda: [False] * 16)
    _active: Dict[int, int] = field(default_factory=dict)
    _listeners: list[Callable[[int, bool], None]] = field(default_factory=list)

    def press(self, key_name: str) -> None:
        key = self._lookup(key_name)
        if key is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_press=%s", key_name)
            return
        before = self._keys[key]
        self._keys[key] = True
        self._active[key] = self._active.get(key, 0) + 1
        if not before:
            self._notify_listeners(key, True)

    def release(self, key_name: str) -> None:
        key = self._lookup(key_name)
        if key is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_release=%s", key_name)
            return
        count = self._active.get(key, 0)
        before = self._keys[key]
        if count <= 1:
            self._keys[key] = False
            self._active.pop(key, None)
        else:
            self._active[key] = count - 1
        if before and not self._keys[key]:
            self._notify_listeners(key, False)

    def reset(self) -> None:
        for key in range(len(self._keys)):
            if self._keys[key]:
                self._keys[key] = False
                self._notify_listeners(key, False)
        self._active.clear()

    def is_pressed(self, key: int) -> bool:
        return self._keys[key & 0xF]

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._keys)

    def add_listener(self, listener: Callable[[int, bool], None]) -> None:
        self._listeners.append(listener)

    def _lookup(self, key_name: str) -> int | None:
        name = key_name.lower()
        name = ALIAS_TABLE.get(name, name)
        return KEY_MAP_TEMPLATE.get(name)

    def _notify_listeners(self, key: int, pressed: bool) -> None:
        if debug_enabled("input"):
            debug_log("input", "keypad key=%x pressed=%s", key, pressed)
        for listener in tuple(self._listeners):
            listener(key, pressed)
