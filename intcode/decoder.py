"""
Intcode Computer: Opcode Table / Parameter-Mode Decoder

An instruction word packs an opcode and its parameter modes as decimal
digits:

      ABCDE          1002
       |||└┴─ opcode (DE)            02 -> MUL
       ||└─── mode of parameter 1    0  -> position
       |└──── mode of parameter 2    1  -> immediate
       └───── mode of parameter 3    0  -> position (missing digit)

The opcode is ``word % 100``. The remaining digits are peeled off
least-significant first, one per operand, left-to-right in instruction
order. Digits that are not written default to position mode, which is
the same as reading the word zero-padded on the left.

Parameter modes:
  POSITION   operand is an address, the value lives at memory[operand]
  IMMEDIATE  operand is the value itself (never valid as a destination)

Opcode profiles gate which opcodes a computer accepts. The first machine
only knew ADD/MUL/HALT; the full machine adds I/O, jumps and comparisons.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterator, Tuple

from .errors import InvalidMode, InvalidOpCode

__all__ = [
    'Mode', 'OpCode', 'Instruction', 'OPCODES', 'BASIC', 'FULL', 'PROFILES',
    'decode', 'pop_modes', 'split_word', 'get_profile',
]


# ──────────────────────────────────────────────
# Parameter modes
# ──────────────────────────────────────────────

class Mode(enum.Enum):
    POSITION = 0
    IMMEDIATE = 1

    @classmethod
    def from_digit(cls, digit: int) -> 'Mode':
        if digit == 0:
            return cls.POSITION
        if digit == 1:
            return cls.IMMEDIATE
        raise InvalidMode(digit)

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def short(self) -> str:
        return self.name[0]


# ──────────────────────────────────────────────
# Opcode table
# ──────────────────────────────────────────────

class OpCode(enum.IntEnum):
    ADD = 1
    MULTIPLY = 2
    INPUT = 3
    OUTPUT = 4
    JUMP_IF_TRUE = 5
    JUMP_IF_FALSE = 6
    LESS_THAN = 7
    EQUALS = 8
    HALT = 99

    @classmethod
    def from_value(cls, value: int) -> 'OpCode':
        try:
            return cls(value)
        except ValueError:
            raise InvalidOpCode(value) from None

    @property
    def mnemonic(self) -> str:
        return OPCODES[self][0]

    @property
    def operand_count(self) -> int:
        return OPCODES[self][1]


# Format: opcode -> (mnemonic, operand_count)
OPCODES: Dict[OpCode, Tuple[str, int]] = {
    # ── Arithmetic ──
    OpCode.ADD:           ('ADD', 3),   # dest := a + b
    OpCode.MULTIPLY:      ('MUL', 3),   # dest := a * b

    # ── I/O ──
    OpCode.INPUT:         ('IN',  1),   # dest := read()
    OpCode.OUTPUT:        ('OUT', 1),   # write(a)

    # ── Control flow ──
    OpCode.JUMP_IF_TRUE:  ('JNZ', 2),   # if cond != 0: ip := target
    OpCode.JUMP_IF_FALSE: ('JZ',  2),   # if cond == 0: ip := target

    # ── Comparison ──
    OpCode.LESS_THAN:     ('LT',  3),   # dest := a < b
    OpCode.EQUALS:        ('EQ',  3),   # dest := a == b

    OpCode.HALT:          ('HLT', 0),
}


# ──────────────────────────────────────────────
# Opcode profiles
# ──────────────────────────────────────────────

BASIC: FrozenSet[OpCode] = frozenset({OpCode.ADD, OpCode.MULTIPLY, OpCode.HALT})
FULL: FrozenSet[OpCode] = frozenset(OpCode)

PROFILES = {
    'basic': {
        'opcodes': BASIC,
        'description': 'ADD/MUL/HLT only (gravity assist machine)',
    },
    'full': {
        'opcodes': FULL,
        'description': 'All opcodes: arithmetic, I/O, jumps, comparisons',
    },
}


def get_profile(name: str) -> FrozenSet[OpCode]:
    """Return the opcode set for a named profile."""
    try:
        return PROFILES[name]['opcodes']
    except KeyError:
        raise KeyError(
            f"Unknown opcode profile {name!r} "
            f"(choose from: {', '.join(PROFILES)})") from None


# ──────────────────────────────────────────────
# Decoding
# ──────────────────────────────────────────────

def split_word(word: int) -> Tuple[int, int]:
    """Split an instruction word into (opcode_value, mode_digits).

    Uses truncating division so a negative word keeps its sign in both
    parts and always decodes to an invalid opcode rather than wrapping.
    """
    if word < 0:
        code, modes = split_word(-word)
        return -code, -modes
    return word % 100, word // 100


def pop_modes(mode_digits: int) -> Iterator[Mode]:
    """Yield parameter modes least-significant digit first, forever.

    Once the explicit digits run out every further mode is POSITION.
    """
    while True:
        if mode_digits < 0:
            digit = -(-mode_digits % 10)
            mode_digits = -(-mode_digits // 10)
        else:
            digit = mode_digits % 10
            mode_digits //= 10
        yield Mode.from_digit(digit)


@dataclass(frozen=True)
class Instruction:
    """One decoded instruction word."""
    word: int
    opcode: OpCode
    modes: Tuple[Mode, ...]

    @property
    def width(self) -> int:
        """Number of memory cells the instruction occupies."""
        return 1 + len(self.modes)

    @property
    def mnemonic(self) -> str:
        return self.opcode.mnemonic


def decode(word: int, opcodes: FrozenSet[OpCode] = FULL) -> Instruction:
    """Decode an instruction word against the enabled opcode set.

    Only as many mode digits are consumed as the opcode has operands;
    anything above them is ignored.

    Raises:
        InvalidOpCode: opcode not in the table or not enabled
        InvalidMode:   a consumed mode digit other than 0 or 1
    """
    value, mode_digits = split_word(word)
    opcode = OpCode.from_value(value)
    if opcode not in opcodes:
        raise InvalidOpCode(value)
    modes = pop_modes(mode_digits)
    return Instruction(word, opcode,
                       tuple(next(modes) for _ in range(opcode.operand_count)))
