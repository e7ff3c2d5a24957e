"""
Intcode Computer
================
A small virtual machine for Intcode programs: a flat list of signed
integers that is both the code and the data.

Architecture:
    ┌──────────┐    ┌──────────┐    ┌──────────┐    ┌───────────┐
    │ Program  │───>│  Loader  │───>│  Memory  │<──>│ Computer  │<──> read()/write()
    │ (1,0,..) │    │ (ints)   │    │ (cells)  │    │ (fetch/   │     channels
    └──────────┘    └──────────┘    └──────────┘    │  decode/  │
                                                    │  execute) │
                                                    └───────────┘

    - loader.py:   Comma-separated text -> list of ints, plus patching
    - memory.py:   Bounded read/write storage (list or sparse backing)
    - decoder.py:  Opcode table, parameter modes, opcode profiles
    - computer.py: Fetch/decode/execute loop, single step or run-to-halt
    - channels.py: Ready-made input/output channels
    - errors.py:   Fault taxonomy (SegFault, InvalidOpCode, ...)
"""

__version__ = "0.5.0"

from .errors import (IntcodeError, InvalidOpCode, InvalidMode, InvalidWriteMode,
                     SegFault, ReadingNotSupported, WritingNotSupported)
from .memory import Memory, ListMemory, SparseMemory, as_memory
from .decoder import (Mode, OpCode, Instruction, BASIC, FULL, PROFILES,
                      decode, get_profile)
from .channels import (InputQueue, OutputCollector, reading_not_supported,
                       writing_not_supported)
from .computer import Computer, State, run_program
from .loader import ProgramFormatError, parse_program, load_program, patch


def execute_program(program, opcodes=FULL) -> int:
    """Run a fresh copy of program with no I/O, return the value at address 0."""
    return Computer(program, opcodes).execute()
