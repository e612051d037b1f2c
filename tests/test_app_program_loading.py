"""Chip8App ROM loading and frame stepping."""

from __future__ import annotations

import pytest

from pychip8.bus import START_ADDRESS
from pychip8.ui.app import AppConfig, Chip8App
from pychip8.utils import TraceRecorder


def test_app_load_program(tmp_path) -> None:
    rom_path = tmp_path / "sample.ch8"
    rom_path.write_bytes(b"\x01\x02\x03")

    app = Chip8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine()

    program = app._load_program(machine, rom_path)

    assert program.length == 3
    for offset, value in enumerate(b"\x01\x02\x03"):
        assert machine.cpu.memory.load8(START_ADDRESS + offset) == value


def test_app_load_missing_program(tmp_path) -> None:
    app = Chip8App(AppConfig())
    machine = app._create_machine()
    with pytest.raises(RuntimeError, match="not found"):
        app._load_program(machine, tmp_path / "missing.ch8")


def test_app_load_empty_program(tmp_path) -> None:
    rom_path = tmp_path / "empty.ch8"
    rom_path.write_bytes(b"")
    app = Chip8App(AppConfig())
    machine = app._create_machine()
    with pytest.raises(RuntimeError, match="Failed to load"):
        app._load_program(machine, rom_path)


def test_app_step_frame_converts_cpu_faults(tmp_path) -> None:
    rom_path = tmp_path / "ret.ch8"
    rom_path.write_bytes(b"\x00\xEE")
    app = Chip8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine()
    app._load_program(machine, rom_path)

    with pytest.raises(RuntimeError, match="CPU fault"):
        app._step_frame(machine)


def test_app_step_frame_records_trace(tmp_path) -> None:
    rom_path = tmp_path / "loop.ch8"
    rom_path.write_bytes(b"\x60\x01\xF1\x0A")
    app = Chip8App(AppConfig(rom_path=rom_path, instructions_per_frame=5))
    app._trace_recorder = TraceRecorder(16)
    machine = app._create_machine()
    app._load_program(machine, rom_path)

    app._step_frame(machine)

    lines = list(app._trace_recorder.format_entries())
    assert len(lines) == 3
    assert "LD V0, 0x01" in lines[0]
    assert "LD V1, K" in lines[1]
    assert "WAIT" in lines[2]


def test_debug_shell_reset_releases_keys(tmp_path, monkeypatch, capsys) -> None:
    rom_path = tmp_path / "wait.ch8"
    rom_path.write_bytes(b"\xF0\x0A")
    app = Chip8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine()
    app._load_program(machine, rom_path)
    machine.keypad.press("w")

    commands = iter(["r", ""])
    monkeypatch.setattr("builtins.input", lambda _prompt: next(commands))
    app._running = True
    app._enter_debug_shell(machine)

    assert "Machine reset." in capsys.readouterr().out
    assert not machine.keypad.is_pressed(0x5)
    assert not machine.cpu.keypad[0x5]
