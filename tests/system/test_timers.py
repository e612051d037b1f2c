"""Tests for the 60 Hz timer driver."""

from __future__ import annotations

import pytest

from pychip8.cpu import Chip8
from pychip8.system import TimerDriver


def test_tick_decrements_both_timers() -> None:
    cpu = Chip8()
    cpu.set_dt(3)
    cpu.set_st(2)
    driver = TimerDriver(cpu)

    assert driver.tick() is True
    assert (cpu.dt, cpu.st) == (2, 1)

    assert driver.tick() is False
    assert (cpu.dt, cpu.st) == (1, 0)


def test_tick_stops_at_zero() -> None:
    cpu = Chip8()
    cpu.set_dt(1)
    driver = TimerDriver(cpu)

    driver.tick(frames=5)

    assert cpu.dt == 0
    assert cpu.st == 0
    assert not driver.sound_active


def test_tick_zero_frames_is_noop() -> None:
    cpu = Chip8()
    cpu.set_st(4)
    driver = TimerDriver(cpu)
    assert driver.tick(0) is True
    assert cpu.st == 4


def test_negative_frames_rejected() -> None:
    with pytest.raises(ValueError):
        TimerDriver(Chip8()).tick(-1)
