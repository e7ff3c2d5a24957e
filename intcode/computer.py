"""
Intcode Computer: Fetch / Decode / Execute Loop

Execution model, one step:
  1. Fetch the instruction word at ip
  2. Decode opcode + parameter modes (decoder.py)
  3. Resolve operands through their modes, run the opcode handler
  4. Commit ip past every operand, or to the jump target

HALT leaves ip where it is and reports State.HALTED. Every other opcode
reports State.RUNNING.

Faults (errors.py) are raised from whichever access failed and are never
caught here: run() stops at the first one and the caller gets it as-is.
Memory is left exactly as it was at the fault, so a faulted image should
be treated as garbage.

Usage:
    comp = Computer([1, 9, 10, 3, 2, 3, 11, 0, 99, 30, 40, 50])
    comp.execute()                      # -> 3500

    out = OutputCollector()
    Computer(program).run(InputQueue([1]), out)
    out.values                          # -> [...]
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, FrozenSet, Iterable, List, Optional, Sequence

from .channels import (InputQueue, OutputCollector, reading_not_supported,
                       writing_not_supported)
from .decoder import FULL, Instruction, Mode, OpCode, decode
from .errors import InvalidWriteMode, SegFault
from .memory import Memory, as_memory

__all__ = ['State', 'Computer', 'run_program']

log = logging.getLogger(__name__)

ReadChannel = Callable[[], int]
WriteChannel = Callable[[int], None]


class State(enum.Enum):
    RUNNING = 'RUNNING'
    HALTED = 'HALTED'


class Computer:
    """Intcode virtual machine over a single, privately owned memory image.

    A computer is built once per run: construct it, run it to HALT, read
    whatever memory/output you need, then throw it away.
    """

    def __init__(self, memory, opcodes: FrozenSet[OpCode] = FULL):
        self.memory: Memory = as_memory(memory)
        self.opcodes = frozenset(opcodes)
        self._ip = 0
        self._steps = 0

        self._trace = False
        self._trace_output: List[str] = []

        # Opcode dispatch table (built in _build_dispatch)
        self._dispatch = self._build_dispatch()

    @property
    def ip(self) -> int:
        return self._ip

    @property
    def steps(self) -> int:
        """Number of instructions executed so far (HALT included)."""
        return self._steps

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self, read: ReadChannel = reading_not_supported,
             write: WriteChannel = writing_not_supported) -> State:
        """Execute one instruction and report whether the machine halted."""
        ip = self._ip
        instr = decode(self.memory.read(ip), self.opcodes)
        params = range(ip + 1, ip + instr.width)

        if self._trace:
            self._record(ip, instr, params)

        if instr.opcode is OpCode.HALT:
            self._steps += 1
            log.info("Halted at ip=%d after %d steps", ip, self._steps)
            return State.HALTED

        target = self._dispatch[instr.opcode](instr.modes, params, read, write)
        self._ip = ip + instr.width if target is None else target
        self._steps += 1
        return State.RUNNING

    def run(self, read: ReadChannel = reading_not_supported,
            write: WriteChannel = writing_not_supported) -> None:
        """Step until HALT. The first fault propagates to the caller."""
        while self.step(read, write) is State.RUNNING:
            pass

    def execute(self) -> int:
        """Run with no I/O wired up and return the value at address 0."""
        self.run(reading_not_supported, writing_not_supported)
        return self.memory.read(0)

    # ══════════════════════════════════════════════
    # Operand access
    # ══════════════════════════════════════════════

    def _load(self, address: int, mode: Mode) -> int:
        value = self.memory.read(address)
        if mode is Mode.POSITION:
            return self.memory.read(value)
        return value

    def _store(self, address: int, mode: Mode, value: int):
        if mode is not Mode.POSITION:
            raise InvalidWriteMode(mode)
        self.memory.write(self.memory.read(address), value)

    # ══════════════════════════════════════════════
    # Opcode handlers
    # ══════════════════════════════════════════════
    # Handler signature: handler(modes, params, read, write) -> new ip or None
    # params are the addresses of the operand cells, in instruction order.

    def _build_dispatch(self) -> dict:
        return {
            OpCode.ADD:           self._op_add,
            OpCode.MULTIPLY:      self._op_mul,
            OpCode.INPUT:         self._op_in,
            OpCode.OUTPUT:        self._op_out,
            OpCode.JUMP_IF_TRUE:  self._op_jnz,
            OpCode.JUMP_IF_FALSE: self._op_jz,
            OpCode.LESS_THAN:     self._op_lt,
            OpCode.EQUALS:        self._op_eq,
        }

    def _op_add(self, modes, params, read, write):
        res = self._load(params[0], modes[0]) + self._load(params[1], modes[1])
        self._store(params[2], modes[2], res)

    def _op_mul(self, modes, params, read, write):
        res = self._load(params[0], modes[0]) * self._load(params[1], modes[1])
        self._store(params[2], modes[2], res)

    def _op_in(self, modes, params, read, write):
        self._store(params[0], modes[0], read())

    def _op_out(self, modes, params, read, write):
        write(self._load(params[0], modes[0]))

    def _op_jnz(self, modes, params, read, write):
        return self._jump_if(True, modes, params)

    def _op_jz(self, modes, params, read, write):
        return self._jump_if(False, modes, params)

    def _op_lt(self, modes, params, read, write):
        a = self._load(params[0], modes[0])
        b = self._load(params[1], modes[1])
        self._store(params[2], modes[2], 1 if a < b else 0)

    def _op_eq(self, modes, params, read, write):
        a = self._load(params[0], modes[0])
        b = self._load(params[1], modes[1])
        self._store(params[2], modes[2], 1 if a == b else 0)

    def _jump_if(self, nonzero: bool, modes, params) -> Optional[int]:
        """Shared body of JNZ/JZ. Both operands are resolved either way."""
        cond = self._load(params[0], modes[0])
        target = self._load(params[1], modes[1])
        if (cond != 0) != nonzero:
            return None
        if target < 0:
            raise SegFault(target)
        return target

    # ══════════════════════════════════════════════
    # Trace / Debug
    # ══════════════════════════════════════════════

    def enable_trace(self, enable: bool = True):
        """Record (and log at DEBUG) every instruction before it executes."""
        self._trace = enable

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()

    def _record(self, ip: int, instr: Instruction, params: Sequence[int]):
        size = len(self.memory)
        raw = ' '.join(str(self.memory.read(p)) if p < size else '?'
                       for p in params)
        modes = ', '.join(m.short for m in instr.modes)
        line = f"{ip:04d}: {instr.mnemonic:<4} [{modes}] {raw}".rstrip()
        self._trace_output.append(line)
        log.debug(line)


def run_program(program, inputs: Iterable[int] = (),
                opcodes: FrozenSet[OpCode] = FULL) -> List[int]:
    """Run a fresh copy of program with the given inputs, return its outputs."""
    out = OutputCollector()
    Computer(program, opcodes).run(InputQueue(inputs), out)
    return out.values
