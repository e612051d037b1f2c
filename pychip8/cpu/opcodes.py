"""Opcode metadata and decoding for the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Final, Iterable, Mapping, Sequence


@dataclass(frozen=True)
class Opcode:
    """A fetched 16-bit instruction word split into its nibble fields."""

    word: int

    @property
    def family(self) -> int:
        return (self.word >> 12) & 0xF

    @property
    def x(self) -> int:
        return (self.word >> 8) & 0xF

    @property
    def y(self) -> int:
        return (self.word >> 4) & 0xF

    @property
    def n(self) -> int:
        return self.word & 0xF

    @property
    def nn(self) -> int:
        return self.word & 0xFF

    @property
    def nnn(self) -> int:
        return self.word & 0xFFF


@dataclass(frozen=True)
class Instruction:
    """Metadata describing a single CHIP-8 instruction.

    ``selector`` is ``None`` for families decoded by the top nibble alone.
    Family ``0x8`` selects on the low nibble, families ``0xE``/``0xF`` on the
    low byte and family ``0x0`` on the full word.
    """

    family: int
    selector: int | None
    mnemonic: str
    operands: str
    handler: str

    def __post_init__(self) -> None:
        if not 0 <= self.family <= 0xF:
            raise ValueError(f"family out of range: {self.family}")

    @property
    def key(self) -> tuple[int, int | None]:
        return (self.family, self.selector)

    def format(self, opcode: Opcode) -> str:
        operands = self.operands.format(
            x=opcode.x,
            y=opcode.y,
            n=opcode.n,
            nn=opcode.nn,
            nnn=opcode.nnn,
        )
        return f"{self.mnemonic} {operands}" if operands else self.mnemonic


class OpcodeTable:
    """Mutable builder for the instruction lookup table."""

    def __init__(self) -> None:
        self._table: Dict[tuple[int, int | None], Instruction] = {}

    def register(self, instruction: Instruction) -> None:
        key = instruction.key
        existing = self._table.get(key)
        if existing is not None:
            raise ValueError(
                f"instruction {instruction.family:X}/{key[1]} already registered as {existing.mnemonic}")
        self._table[key] = instruction

    def register_all(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.register(instruction)

    def freeze(self) -> Mapping[tuple[int, int | None], Instruction]:
        return dict(self._table)


def build_instruction_table(
    instructions: Iterable[Instruction],
) -> Mapping[tuple[int, int | None], Instruction]:
    table = OpcodeTable()
    table.register_all(instructions)
    return table.freeze()


DEFAULT_INSTRUCTIONS: Sequence[Instruction] = (
    # System and flow control
    Instruction(0x0, 0x00E0, "CLS", "", "op_cls"),
    Instruction(0x0, 0x00EE, "RET", "", "op_ret"),
    Instruction(0x0, None, "SYS", "0x{nnn:03X}", "op_sys"),
    Instruction(0x1, None, "JP", "0x{nnn:03X}", "op_jp"),
    Instruction(0x2, None, "CALL", "0x{nnn:03X}", "op_call"),
    Instruction(0x3, None, "SE", "V{x:X}, 0x{nn:02X}", "op_se_byte"),
    Instruction(0x4, None, "SNE", "V{x:X}, 0x{nn:02X}", "op_sne_byte"),
    Instruction(0x5, None, "SE", "V{x:X}, V{y:X}", "op_se_register"),
    Instruction(0x6, None, "LD", "V{x:X}, 0x{nn:02X}", "op_ld_byte"),
    Instruction(0x7, None, "ADD", "V{x:X}, 0x{nn:02X}", "op_add_byte"),
    # Register/register arithmetic
    Instruction(0x8, 0x0, "LD", "V{x:X}, V{y:X}", "op_ld_register"),
    Instruction(0x8, 0x1, "OR", "V{x:X}, V{y:X}", "op_or"),
    Instruction(0x8, 0x2, "AND", "V{x:X}, V{y:X}", "op_and"),
    Instruction(0x8, 0x3, "XOR", "V{x:X}, V{y:X}", "op_xor"),
    Instruction(0x8, 0x4, "ADD", "V{x:X}, V{y:X}", "op_add_register"),
    Instruction(0x8, 0x5, "SUB", "V{x:X}, V{y:X}", "op_sub"),
    Instruction(0x8, 0x6, "SHR", "V{x:X}", "op_shr"),
    Instruction(0x8, 0x7, "SUBN", "V{x:X}, V{y:X}", "op_subn"),
    Instruction(0x8, 0xE, "SHL", "V{x:X}", "op_shl"),
    Instruction(0x9, None, "SNE", "V{x:X}, V{y:X}", "op_sne_register"),
    # Address register, jumps, random, drawing
    Instruction(0xA, None, "LD", "I, 0x{nnn:03X}", "op_ld_i"),
    Instruction(0xB, None, "JP", "V0, 0x{nnn:03X}", "op_jp_v0"),
    Instruction(0xC, None, "RND", "V{x:X}, 0x{nn:02X}", "op_rnd"),
    Instruction(0xD, None, "DRW", "V{x:X}, V{y:X}, {n}", "op_drw"),
    # Keypad
    Instruction(0xE, 0x9E, "SKP", "V{x:X}", "op_skp"),
    Instruction(0xE, 0xA1, "SKNP", "V{x:X}", "op_sknp"),
    # Timers and memory block transfers
    Instruction(0xF, 0x07, "LD", "V{x:X}, DT", "op_ld_from_dt"),
    Instruction(0xF, 0x0A, "LD", "V{x:X}, K", "op_ld_key"),
    Instruction(0xF, 0x15, "LD", "DT, V{x:X}", "op_ld_dt"),
    Instruction(0xF, 0x18, "LD", "ST, V{x:X}", "op_ld_st"),
    Instruction(0xF, 0x1E, "ADD", "I, V{x:X}", "op_add_i"),
    Instruction(0xF, 0x29, "LD", "F, V{x:X}", "op_ld_sprite"),
    Instruction(0xF, 0x33, "LD", "B, V{x:X}", "op_ld_bcd"),
    Instruction(0xF, 0x55, "LD", "[I], V{x:X}", "op_store_registers"),
    Instruction(0xF, 0x65, "LD", "V{x:X}, [I]", "op_load_registers"),
)


INSTRUCTION_TABLE: Final[Mapping[tuple[int, int | None], Instruction]] = build_instruction_table(
    DEFAULT_INSTRUCTIONS
)


def decode(word: int) -> Opcode:
    return Opcode(word & 0xFFFF)


def lookup(
    opcode: Opcode,
    table: Mapping[tuple[int, int | None], Instruction] = INSTRUCTION_TABLE,
) -> Instruction | None:
    """Return the instruction for ``opcode`` or ``None`` if it is undefined."""

    family = opcode.family
    if family == 0x0:
        return table.get((family, opcode.word)) or table.get((family, None))
    if family == 0x8:
        return table.get((family, opcode.n))
    if family in (0xE, 0xF):
        return table.get((family, opcode.nn))
    return table.get((family, None))


def disassemble(word: int) -> str:
    """Return assembler text for ``word``, e.g. ``LD V0, 0xFF``."""

    opcode = decode(word)
    instruction = lookup(opcode)
    if instruction is None:
        return f"DW 0x{opcode.word:04X}"
    return instruction.format(opcode)
