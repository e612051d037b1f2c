"""CHIP-8 machine assembly."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Optional

from pychip8.cpu import Chip8, CPUState
from pychip8.cpu.opcodes import Opcode
from pychip8.io import Keypad
from pychip8.loader import build_memory_image

from .timers import TimerDriver

DEFAULT_INSTRUCTIONS_PER_FRAME = 11  # roughly 660 instructions per second

# Called with the state before a step and the opcode it ran, or None when the
# frame stopped on a pending key wait.
StepHook = Callable[[CPUState, Optional[Opcode]], None]


@dataclass
class MachineConfig:
    """Runtime configuration for the CHIP-8 machine."""

    rom_image: Optional[bytes] = None
    seed: Optional[int] = None
    instructions_per_frame: int = DEFAULT_INSTRUCTIONS_PER_FRAME


@dataclass
class Machine:
    """Aggregates the interpreter with its external collaborators."""

    cpu: Chip8
    keypad: Keypad
    timers: TimerDriver
    instructions_per_frame: int = DEFAULT_INSTRUCTIONS_PER_FRAME

    def run_frame(self, on_step: StepHook | None = None) -> bool:
        """Run one 60 Hz frame of instructions and tick the timers once.

        Returns True while the sound timer is active.
        """

        cpu = self.cpu
        for _ in range(self.instructions_per_frame):
            if cpu.waiting_for_key:
                if on_step is not None:
                    on_step(cpu.snapshot(), None)
                break
            if on_step is None:
                cpu.cycle()
                continue
            state_before = cpu.snapshot()
            opcode = cpu.cycle()
            on_step(state_before, opcode)
        return self.timers.tick()

    def reset(self) -> None:
        """Release every held key, then reset the interpreter."""

        self.keypad.reset()
        self.cpu.reset()


def create_machine(config: MachineConfig) -> Machine:
    """Instantiate a CHIP-8 machine with the requested configuration."""

    if config.instructions_per_frame <= 0:
        raise ValueError("instructions_per_frame must be positive")

    cpu = Chip8(rng=random.Random(config.seed))
    if config.rom_image:
        cpu.load_into_memory(build_memory_image(config.rom_image))

    keypad = Keypad()
    keypad.add_listener(cpu.set_key)

    return Machine(
        cpu=cpu,
        keypad=keypad,
        timers=TimerDriver(cpu),
        instructions_per_frame=config.instructions_per_frame,
    )
