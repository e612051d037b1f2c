"""Tests for the hexadecimal keypad mapping."""

from __future__ import annotations

from pychip8.io import Keypad


def test_key_down_and_up() -> None:
    pad = Keypad()

    pad.press("x")
    assert pad.is_pressed(0x0)

    pad.release("x")
    assert not pad.is_pressed(0x0)


def test_layout_matches_cosmac_grid() -> None:
    pad = Keypad()
    for name in ("4", "r", "f", "v"):
        pad.press(name)
    assert [index for index, down in enumerate(pad.snapshot()) if down] == [0xC, 0xD, 0xE, 0xF]


def test_alias_shares_key_with_its_target() -> None:
    pad = Keypad()
    pad.press("up")
    pad.press("2")

    pad.release("up")
    assert pad.is_pressed(0x2)

    pad.release("2")
    assert not pad.is_pressed(0x2)


def test_listeners_see_edges_only() -> None:
    pad = Keypad()
    events: list[tuple[int, bool]] = []
    pad.add_listener(lambda key, pressed: events.append((key, pressed)))

    pad.press("Q")
    pad.press("left")
    pad.release("q")
    pad.release("left")

    assert events == [(0x4, True), (0x4, False)]


def test_unmapped_keys_are_ignored() -> None:
    pad = Keypad()
    pad.press("escape")
    assert not any(pad.snapshot())


def test_reset_clears_keys() -> None:
    pad = Keypad()
    events: list[tuple[int, bool]] = []
    pad.add_listener(lambda key, pressed: events.append((key, pressed)))
    pad.press("z")
    pad.reset()
    assert not any(pad.snapshot())
    assert events[-1] == (0xA, False)
