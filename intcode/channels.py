"""
Intcode Computer: I/O Channels

The computer does no I/O of its own. Each run is handed two callables:

    read()        -> int   next input value, or raise to refuse
    write(value)  -> None  accept an output value, or raise to refuse

A channel refuses by raising ReadingNotSupported / WritingNotSupported.
Any plain function or lambda with the right shape works; the helpers here
cover the common cases.
"""

from collections import deque
from typing import Iterable, List, Optional

from .errors import ReadingNotSupported, WritingNotSupported

__all__ = [
    'reading_not_supported', 'writing_not_supported',
    'InputQueue', 'OutputCollector',
]


def reading_not_supported() -> int:
    raise ReadingNotSupported()


def writing_not_supported(value: int) -> None:
    raise WritingNotSupported()


class InputQueue:
    """Read channel that hands out a fixed sequence of values in order.

    Once the values are used up every further read raises
    ReadingNotSupported.
    """

    def __init__(self, values: Iterable[int] = ()):
        self._pending = deque(int(v) for v in values)

    def __call__(self) -> int:
        if not self._pending:
            raise ReadingNotSupported()
        return self._pending.popleft()

    def push(self, value: int):
        self._pending.append(int(value))

    @property
    def remaining(self) -> int:
        return len(self._pending)


class OutputCollector:
    """Write channel that records every value, preserving order and count."""

    def __init__(self):
        self.values: List[int] = []

    def __call__(self, value: int) -> None:
        self.values.append(value)

    @property
    def last(self) -> Optional[int]:
        return self.values[-1] if self.values else None

    def __len__(self):
        return len(self.values)
