"""Core CHIP-8 interpreter."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Final, Mapping, Sequence

from pychip8.bus import START_ADDRESS, Memory, mask12
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import DisplayBuffer
from pychip8.video.font import glyph_address

from .opcodes import INSTRUCTION_TABLE, Instruction, Opcode, decode, lookup


class CPUError(Exception):
    """Base error for CPU-related failures."""


class IllegalOpcodeError(CPUError):
    """Raised when the fetched word is not a defined instruction."""


class StackOverflowError(CPUError):
    """Raised by CALL when every stack slot is already in use."""


class StackUnderflowError(CPUError):
    """Raised by RET when the stack is empty."""


REGISTER_COUNT: Final[int] = 16
STACK_SIZE: Final[int] = 16
KEY_COUNT: Final[int] = 16
FLAG: Final[int] = 0xF

_ADVANCE: Final[int] = 2


class RunState(Enum):
    RUNNING = auto()
    WAITING_FOR_KEY = auto()


@dataclass
class CPUState:
    """Snapshot of the CHIP-8 register file.

    ``v[0xF]`` doubles as the carry/borrow/collision flag; any instruction
    that reports a flag overwrites whatever a program stored there.
    """

    v: list[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    i: int = 0x0000
    pc: int = START_ADDRESS
    sp: int = 0
    dt: int = 0x00
    st: int = 0x00
    stack: list[int] = field(default_factory=lambda: [0] * STACK_SIZE)

    def clone(self) -> "CPUState":
        return CPUState(list(self.v), self.i, self.pc, self.sp, self.dt, self.st, list(self.stack))


@dataclass
class Chip8:
    """CHIP-8 interpreter owning memory, registers, keypad and display.

    Each :meth:`cycle` executes at most one instruction. Timers are only
    changed through :meth:`set_dt`/:meth:`set_st`, which an external 60 Hz
    driver calls.
    """

    memory: Memory = field(default_factory=Memory)
    rng: random.Random = field(default_factory=random.Random)
    instruction_table: Mapping[tuple[int, int | None], Instruction] = field(
        default_factory=lambda: INSTRUCTION_TABLE
    )

    state: CPUState = field(default_factory=CPUState)
    display: DisplayBuffer = field(default_factory=DisplayBuffer)
    keypad: list[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    run_state: RunState = RunState.RUNNING
    waiting_register: int | None = None
    cycle_count: int = 0

    def reset(self) -> None:
        """Zero every piece of state and copy the font back into memory."""

        self.state = CPUState()
        self.memory.clear()
        self.display.clear()
        self.keypad[:] = [False] * KEY_COUNT
        self.run_state = RunState.RUNNING
        self.waiting_register = None
        self.cycle_count = 0

    def load_into_memory(self, image: bytes | Sequence[int]) -> None:
        """Replace the memory store with a 4096 byte ``image``.

        Only memory changes. The font region is overwritten too, so the image
        must carry the font unless a blank image is intended.
        """

        self.memory.load_image(bytes(image))
        if debug_enabled("cpu"):
            debug_log("cpu", "memory image loaded pc=%03x", self.state.pc)

    def cycle(self) -> Opcode | None:
        """Execute one instruction, or nothing while waiting for a key."""

        if self.run_state is RunState.WAITING_FOR_KEY:
            return None

        pc_before = self.state.pc
        opcode = decode(self.memory.load16(pc_before))
        instruction = lookup(opcode, self.instruction_table)
        if instruction is None:
            raise IllegalOpcodeError(f"illegal opcode {opcode.word:04x} at {pc_before:03x}")
        handler = getattr(self, instruction.handler, None)
        if handler is None:
            raise CPUError(f"handler '{instruction.handler}' not implemented")

        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%03x opcode=%04x %s", pc_before, opcode.word, instruction.format(opcode))

        advance = handler(opcode)
        if advance is None:
            advance = _ADVANCE
        self.state.pc = mask12(self.state.pc + advance)
        self.cycle_count += 1
        return opcode

    # ------------------------------------------------------------------
    # Snapshots and mutators

    @property
    def pc(self) -> int:
        return self.state.pc

    @property
    def i(self) -> int:
        return self.state.i

    @property
    def sp(self) -> int:
        return self.state.sp

    @property
    def dt(self) -> int:
        return self.state.dt

    @property
    def st(self) -> int:
        return self.state.st

    @property
    def registers(self) -> tuple[int, ...]:
        return tuple(self.state.v)

    @property
    def stack(self) -> tuple[int, ...]:
        return tuple(self.state.stack)

    @property
    def display_buffer(self) -> tuple[int, ...]:
        return self.display.snapshot()

    @property
    def waiting_for_key(self) -> bool:
        return self.run_state is RunState.WAITING_FOR_KEY

    def snapshot(self) -> CPUState:
        return self.state.clone()

    def set_dt(self, value: int) -> None:
        self.state.dt = value & 0xFF

    def set_st(self, value: int) -> None:
        self.state.st = value & 0xFF

    def set_key(self, key: int, pressed: bool) -> None:
        """Record the state of ``key`` and resume a pending key wait."""

        self.keypad[key] = pressed
        if debug_enabled("input"):
            debug_log("input", "key=%x pressed=%s", key, pressed)
        if pressed and self.run_state is RunState.WAITING_FOR_KEY:
            self._resolve_key_wait()

    def is_key_pressed(self, key: int) -> bool:
        return self.keypad[key & 0xF]

    # ------------------------------------------------------------------
    # Flow control

    def op_sys(self, opcode: Opcode) -> int:
        self.state.pc = opcode.nnn
        return 0

    def op_cls(self, _: Opcode) -> None:
        self.display.clear()

    def op_ret(self, _: Opcode) -> int:
        if self.state.sp == 0:
            raise StackUnderflowError(f"return with empty stack at {self.state.pc:03x}")
        self.state.sp -= 1
        self.state.pc = self.state.stack[self.state.sp]
        return 0

    def op_jp(self, opcode: Opcode) -> int:
        self.state.pc = opcode.nnn
        return 0

    def op_call(self, opcode: Opcode) -> int:
        if self.state.sp >= STACK_SIZE:
            raise StackOverflowError(f"call to {opcode.nnn:03x} with full stack at {self.state.pc:03x}")
        self.state.stack[self.state.sp] = mask12(self.state.pc + _ADVANCE)
        self.state.sp += 1
        self.state.pc = opcode.nnn
        return 0

    def op_jp_v0(self, opcode: Opcode) -> int:
        self.state.pc = mask12(self.state.v[0] + opcode.nnn)
        return 0

    def op_se_byte(self, opcode: Opcode) -> int:
        return self._skip_if(self.state.v[opcode.x] == opcode.nn)

    def op_sne_byte(self, opcode: Opcode) -> int:
        return self._skip_if(self.state.v[opcode.x] != opcode.nn)

    def op_se_register(self, opcode: Opcode) -> int:
        return self._skip_if(self.state.v[opcode.x] == self.state.v[opcode.y])

    def op_sne_register(self, opcode: Opcode) -> int:
        return self._skip_if(self.state.v[opcode.x] != self.state.v[opcode.y])

    # ------------------------------------------------------------------
    # Arithmetic and logic

    def op_ld_byte(self, opcode: Opcode) -> None:
        self.state.v[opcode.x] = opcode.nn

    def op_add_byte(self, opcode: Opcode) -> None:
        self.state.v[opcode.x] = (self.state.v[opcode.x] + opcode.nn) & 0xFF

    def op_ld_register(self, opcode: Opcode) -> None:
        self.state.v[opcode.x] = self.state.v[opcode.y]

    def op_or(self, opcode: Opcode) -> None:
        self.state.v[opcode.x] |= self.state.v[opcode.y]

    def op_and(self, opcode: Opcode) -> None:
        self.state.v[opcode.x] &= self.state.v[opcode.y]

    def op_xor(self, opcode: Opcode) -> None:
        self.state.v[opcode.x] ^= self.state.v[opcode.y]

    def op_add_register(self, opcode: Opcode) -> None:
        vx, vy = self.state.v[opcode.x], self.state.v[opcode.y]
        total = vx + vy
        self._write_with_flag(opcode.x, total & 0xFF, total > 0xFF)

    def op_sub(self, opcode: Opcode) -> None:
        vx, vy = self.state.v[opcode.x], self.state.v[opcode.y]
        self._write_with_flag(opcode.x, (vx - vy) & 0xFF, vx >= vy)

    def op_subn(self, opcode: Opcode) -> None:
        vx, vy = self.state.v[opcode.x], self.state.v[opcode.y]
        self._write_with_flag(opcode.x, (vy - vx) & 0xFF, vy >= vx)

    def op_shr(self, opcode: Opcode) -> None:
        vx = self.state.v[opcode.x]
        self._write_with_flag(opcode.x, vx >> 1, bool(vx & 0x01))

    def op_shl(self, opcode: Opcode) -> None:
        vx = self.state.v[opcode.x]
        self._write_with_flag(opcode.x, (vx << 1) & 0xFF, bool(vx & 0x80))

    def op_rnd(self, opcode: Opcode) -> None:
        self.state.v[opcode.x] = self.rng.randrange(0x100) & opcode.nn

    # ------------------------------------------------------------------
    # Address register and drawing

    def op_ld_i(self, opcode: Opcode) -> None:
        self.state.i = opcode.nnn

    def op_drw(self, opcode: Opcode) -> None:
        origin_x = self.state.v[opcode.x]
        origin_y = self.state.v[opcode.y]
        rows = self.memory.load_block(self.state.i, opcode.n)
        self.state.v[FLAG] = 0
        collision = self.display.draw_sprite(origin_x, origin_y, rows)
        if collision:
            self.state.v[FLAG] = 1

    # ------------------------------------------------------------------
    # Keypad

    def op_skp(self, opcode: Opcode) -> int:
        return self._skip_if(self.is_key_pressed(self.state.v[opcode.x]))

    def op_sknp(self, opcode: Opcode) -> int:
        return self._skip_if(not self.is_key_pressed(self.state.v[opcode.x]))

    def op_ld_key(self, opcode: Opcode) -> int:
        self.run_state = RunState.WAITING_FOR_KEY
        self.waiting_register = opcode.x
        if debug_enabled("input"):
            debug_log("input", "waiting for key into V%X pc=%03x", opcode.x, self.state.pc)
        return 0

    # ------------------------------------------------------------------
    # Timers and memory blocks

    def op_ld_from_dt(self, opcode: Opcode) -> None:
        self.state.v[opcode.x] = self.state.dt

    def op_ld_dt(self, opcode: Opcode) -> None:
        self.state.dt = self.state.v[opcode.x]

    def op_ld_st(self, opcode: Opcode) -> None:
        self.state.st = self.state.v[opcode.x]

    def op_add_i(self, opcode: Opcode) -> None:
        # No 12-bit mask here; I may grow past 0xFFF.
        self.state.i = (self.state.i + self.state.v[opcode.x]) & 0xFFFF

    def op_ld_sprite(self, opcode: Opcode) -> None:
        self.state.i = glyph_address(self.state.v[opcode.x])

    def op_ld_bcd(self, opcode: Opcode) -> None:
        value = self.state.v[opcode.x]
        address = self.state.i
        self.memory.store8(address, value // 100)
        self.memory.store8(address + 1, (value // 10) % 10)
        self.memory.store8(address + 2, value % 10)

    def op_store_registers(self, opcode: Opcode) -> None:
        # I is left unchanged afterwards.
        address = self.state.i
        for index in range(opcode.x + 1):
            self.memory.store8(address + index, self.state.v[index])

    def op_load_registers(self, opcode: Opcode) -> None:
        address = self.state.i
        for index in range(opcode.x + 1):
            self.state.v[index] = self.memory.load8(address + index)

    # ------------------------------------------------------------------
    # Helpers

    def _skip_if(self, condition: bool) -> int:
        return _ADVANCE * 2 if condition else _ADVANCE

    def _write_with_flag(self, register: int, value: int, flag: bool) -> None:
        # Result first, flag last: with register == VF the flag wins.
        self.state.v[register] = value
        self.state.v[FLAG] = 1 if flag else 0

    def _resolve_key_wait(self) -> None:
        for key in range(KEY_COUNT):
            if not self.keypad[key]:
                continue
            register = self.waiting_register
            self.state.v[register] = key
            self.state.pc = mask12(self.state.pc + _ADVANCE)
            self.run_state = RunState.RUNNING
            self.waiting_register = None
            if debug_enabled("input"):
                debug_log("input", "key wait resolved key=%x V%X pc=%03x", key, register, self.state.pc)
            return
