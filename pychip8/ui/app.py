"""Pygame front end for the CHIP-8 interpreter."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pychip8.audio import SquareWaveBeeper
from pychip8.cpu import CPUError, CPUState
from pychip8.cpu.opcodes import Opcode, disassemble
from pychip8.loader import RomFormatError, RomImage, load_rom_from_path
from pychip8.system import Machine, MachineConfig, TIMER_RATE, create_machine
from pychip8.system.machine import DEFAULT_INSTRUCTIONS_PER_FRAME
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import HEIGHT, MONOCHROME, WIDTH, Renderer
from pychip8.video.palette import RGBColor


@dataclass
class AppConfig:
    """Configuration for the CHIP-8 emulator frontend."""

    rom_path: Optional[Path] = None
    scale: int = 10
    fullscreen: bool = False
    instructions_per_frame: int = DEFAULT_INSTRUCTIONS_PER_FRAME
    seed: Optional[int] = None
    palette: tuple[RGBColor, RGBColor] = MONOCHROME
    enable_audio: bool = True


class Chip8App:
    """Thin wrapper around the pygame event loop."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._running = False
        self._beeper: SquareWaveBeeper | None = None
        self._machine: Machine | None = None
        self._pygame = None
        self._trace_recorder: TraceRecorder | None = None
        if debug_enabled("trace"):
            self._trace_recorder = TraceRecorder(512)
        self._frame_counter = 0

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        if not self._config.rom_path:
            raise RuntimeError("ROM image is required; pass --rom <path>")

        machine = self._create_machine()
        self._machine = machine
        self._load_program(machine, self._config.rom_path)

        pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        pygame.display.set_caption(f"CHIP-8 - {self._config.rom_path.name}")
        self._pygame = pygame

        if self._config.enable_audio:
            self._initialise_audio(pygame)

        renderer = Renderer(self._config.palette)
        surface_size = (WIDTH * self._config.scale, HEIGHT * self._config.scale)
        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        screen = pygame.display.set_mode(surface_size, flags)

        clock = pygame.time.Clock()
        self._running = True

        while self._running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self._running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    self._enter_debug_shell(machine)
                elif event.type == pygame.KEYDOWN:
                    self._handle_key_event(pygame, event.key, pressed=True)
                elif event.type == pygame.KEYUP:
                    self._handle_key_event(pygame, event.key, pressed=False)

            sound_active = self._step_frame(machine)
            if self._beeper is not None:
                self._beeper.set_active(sound_active)

            frame = renderer.render(machine.cpu.display_buffer, scale=self._config.scale)
            screen.blit(frame.to_surface(), (0, 0))
            pygame.display.flip()

            clock.tick(TIMER_RATE)
            self._frame_counter += 1

        if self._beeper is not None:
            self._beeper.shutdown()
        pygame.quit()

    def _initialise_audio(self, pygame) -> None:
        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init(44_100, -16, 1)
            except pygame.error as exc:  # pragma: no cover - best-effort path
                if debug_enabled("audio"):
                    debug_log("audio", "mixer_init_failed=%s", exc)
                return
        mixer_state = pygame.mixer.get_init()
        if mixer_state is None:
            if debug_enabled("audio"):
                debug_log("audio", "mixer_unavailable")
            return
        try:
            self._beeper = SquareWaveBeeper(sample_rate=mixer_state[0])
        except RuntimeError as exc:
            self._beeper = None
            if debug_enabled("audio"):
                debug_log("audio", "beeper_init_failed=%s", exc)

    def _handle_key_event(self, pygame, key_code: int, *, pressed: bool) -> None:
        machine = self._machine
        if machine is None:
            return
        name = pygame.key.name(key_code)
        if debug_enabled("input"):
            debug_log("input", "event=%s pressed=%s", name, pressed)
        if pressed:
            machine.keypad.press(name)
        else:
            machine.keypad.release(name)

    def _create_machine(self) -> Machine:
        return create_machine(
            MachineConfig(
                seed=self._config.seed,
                instructions_per_frame=self._config.instructions_per_frame,
            )
        )

    def _load_program(self, machine: Machine, program_path: Path) -> RomImage:
        try:
            return load_rom_from_path(program_path, machine.cpu)
        except FileNotFoundError as exc:
            raise RuntimeError(f"ROM file not found: {program_path}") from exc
        except RomFormatError as exc:
            raise RuntimeError(f"Failed to load ROM {program_path}: {exc}") from exc

    def _step_frame(self, machine: Machine) -> bool:
        trace = self._trace_recorder
        on_step = None if trace is None else self._record_step
        try:
            return machine.run_frame(on_step)
        except CPUError as exc:
            self._running = False
            if trace is not None:
                trace.dump("trace", limit=32)
            raise RuntimeError(f"CPU fault: {exc}") from exc

    def _record_step(self, state_before: CPUState, opcode: Opcode | None) -> None:
        trace = self._trace_recorder
        if trace is None:
            return
        if opcode is None:
            trace.record_step(state_before, None, waiting=True, note="key-wait")
        else:
            trace.record_step(state_before, opcode.word, waiting=False, mnemonic=disassemble(opcode.word))

    # ------------------------------------------------------------------
    # Debug shell

    def _enter_debug_shell(self, machine: Machine) -> None:
        print("\n=== CHIP-8 Debug Menu ===")
        print("Enter command: [c]pu, [d]isplay, [m]em, [t]race, [r]eset, [q]uit, [Enter] resume")

        paused = True
        while paused and self._running:
            try:
                command = input("debug> ").strip().lower()
            except (EOFError, KeyboardInterrupt):
                print("Resuming emulator.")
                break

            if command == "" or command == "resume":
                paused = False
            elif command in {"c", "cpu"}:
                self._dump_cpu(machine)
            elif command in {"d", "display"}:
                self._dump_display(machine)
            elif command in {"t", "trace"}:
                self._dump_trace()
            elif command in {"r", "reset"}:
                machine.reset()
                print("Machine reset.")
            elif command.startswith("m"):
                arguments = command[1:].strip()
                self._dump_memory(machine, arguments if arguments else None)
            elif command in {"q", "quit", "exit"}:
                print("Exiting emulator.")
                self._running = False
                paused = False
            else:
                print("Commands: [Enter]=resume, [c]pu, [d]isplay, [m]em, [t]race, [r]eset, [q]uit")

        if self._pygame is not None:
            self._pygame.event.clear()

    def _dump_cpu(self, machine: Machine) -> None:
        cpu = machine.cpu
        print(f"PC={cpu.pc:03X} I={cpu.i:04X} SP={cpu.sp:02d} DT={cpu.dt:02X} ST={cpu.st:02X}")
        print("V: " + " ".join(f"{index:X}={value:02X}" for index, value in enumerate(cpu.registers)))
        frames = " ".join(f"{value:03X}" for value in cpu.stack[: cpu.sp])
        print(f"stack: {frames or '-'}")
        if cpu.waiting_for_key:
            print(f"waiting for key into V{cpu.waiting_register:X}")
        print(f"next: {disassemble(cpu.memory.load16(cpu.pc))}")

    def _dump_display(self, machine: Machine) -> None:
        pixels = machine.cpu.display_buffer
        for y in range(HEIGHT):
            row = pixels[y * WIDTH : (y + 1) * WIDTH]
            print("".join("#" if value else "." for value in row))

    def _dump_trace(self, limit: int = 64) -> None:
        if self._trace_recorder is None:
            print("Trace recorder is disabled. Set CHIP8_DEBUG=trace to enable it.")
            return
        lines = list(self._trace_recorder.format_entries(limit))
        if not lines:
            print("Trace buffer is empty.")
            return
        print("Last trace entries:")
        for line in lines:
            print(f"  {line}")

    def _dump_memory(self, machine: Machine, arguments: str | None = None) -> None:
        parts = (arguments or "").split()
        try:
            start = int(parts[0], 16) if parts else machine.cpu.pc
            length = int(parts[1], 0) if len(parts) > 1 else 0x40
        except ValueError:
            print("Usage: m [start_hex] [length]")
            return
        if length <= 0:
            print("Length must be positive.")
            return

        memory = machine.cpu.memory
        end = start + length
        for addr in range(start, end, 16):
            chunk = [memory.load8(addr + offset) for offset in range(16) if addr + offset < end]
            hex_part = " ".join(f"{value:02X}" for value in chunk)
            print(f"{addr & 0xFFF:03X}: {hex_part}")
