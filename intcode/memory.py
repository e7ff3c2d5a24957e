"""
Intcode Computer: Memory Backings

The interpreter only ever talks to memory through two operations:

    read(address) -> int
    write(address, value) -> None

Both are bounded. An address at or beyond the image length (or below zero)
raises SegFault carrying the offending address. Writes never grow the
image: program images are fixed-size, so an out-of-range store is a real
fault in the program, not a request for more room.

Two backings are provided:
  ListMemory    contiguous list copy of the image (the default)
  SparseMemory  dict of non-zero cells over a fixed logical size

Anything implementing the Memory ABC can be handed to Computer.
"""

from __future__ import annotations

import abc
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import SegFault

__all__ = ['Memory', 'ListMemory', 'SparseMemory', 'as_memory']


class Memory(abc.ABC):
    """Bounded, integer-addressed storage for an Intcode program."""

    @abc.abstractmethod
    def read(self, address: int) -> int:
        """Return the value at address, or raise SegFault."""

    @abc.abstractmethod
    def write(self, address: int, value: int) -> None:
        """Store value at address, or raise SegFault."""

    @abc.abstractmethod
    def __len__(self) -> int:
        ...

    def _check(self, address: int):
        if not 0 <= address < len(self):
            raise SegFault(address)

    # --- Inspection helpers (shared by every backing) ---

    def snapshot(self) -> List[int]:
        """Capture the current contents for later diffing."""
        return [self.read(addr) for addr in range(len(self))]

    def diff(self, snapshot: List[int]) -> Dict[int, Tuple[int, int]]:
        """Compare a snapshot with the current contents.

        Returns {address: (old, new)} for every cell that changed.
        """
        changes = {}
        for addr in range(min(len(snapshot), len(self))):
            new = self.read(addr)
            if snapshot[addr] != new:
                changes[addr] = (snapshot[addr], new)
        return changes

    def dump(self, start: int = 0, length: Optional[int] = None,
             per_row: int = 8) -> str:
        """Produce a listing of memory for debugging, one row per 8 cells."""
        end = len(self) if length is None else min(len(self), start + length)
        lines = []
        for row in range(start, end, per_row):
            cells = ' '.join(f'{self.read(addr):>6}'
                             for addr in range(row, min(row + per_row, end)))
            lines.append(f'{row:04d}  {cells}')
        return '\n'.join(lines)


class ListMemory(Memory):
    """Contiguous memory image backed by a private list copy."""

    def __init__(self, values: Iterable[int]):
        self._cells: List[int] = [int(v) for v in values]

    def __len__(self) -> int:
        return len(self._cells)

    def read(self, address: int) -> int:
        self._check(address)
        return self._cells[address]

    def write(self, address: int, value: int) -> None:
        self._check(address)
        self._cells[address] = value

    def snapshot(self) -> List[int]:
        return list(self._cells)

    def __repr__(self):
        return f"ListMemory({self._cells!r})"


class SparseMemory(Memory):
    """Fixed-size memory that only stores non-zero cells.

    Unset cells read as 0. Useful for large, mostly empty images.
    """

    def __init__(self, size: int, values: Optional[Iterable[int]] = None):
        if size < 0:
            raise ValueError(f"Memory size must be non-negative, got {size}")
        self._size = size
        self._cells: Dict[int, int] = {}
        if values is not None:
            for addr, value in enumerate(values):
                self.write(addr, int(value))

    def __len__(self) -> int:
        return self._size

    def read(self, address: int) -> int:
        self._check(address)
        return self._cells.get(address, 0)

    def write(self, address: int, value: int) -> None:
        self._check(address)
        if value:
            self._cells[address] = value
        else:
            self._cells.pop(address, None)

    def __repr__(self):
        return f"SparseMemory(size={self._size}, cells={len(self._cells)})"


def as_memory(obj) -> Memory:
    """Return obj unchanged if it is a Memory, else wrap it in ListMemory."""
    if isinstance(obj, Memory):
        return obj
    return ListMemory(obj)
