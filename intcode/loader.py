"""
Intcode program loader.

Program text is a comma-separated list of signed decimal integers, e.g.

    1,9,10,3,2,3,11,0,99,30,40,50

Whitespace around values and a trailing newline are ignored, and a single
trailing comma is tolerated. Anything else that isn't an integer is
rejected with ProgramFormatError.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, List, Sequence, Union

from .errors import IntcodeError, SegFault

__all__ = ['ProgramFormatError', 'parse_program', 'load_program', 'patch']

log = logging.getLogger(__name__)

_INT_RE = re.compile(r'^[+-]?\d+$')


class ProgramFormatError(IntcodeError):
    """Raised when program text is not a valid comma-separated list."""

    def __init__(self, message: str, index: int = -1, token: str = ""):
        self.index = index
        self.token = token
        if index >= 0:
            message = f"Value {index}: {message} ({token!r})"
        super().__init__(message)

    def _payload(self) -> tuple:
        return (self.index, self.token)


def parse_program(text: str) -> List[int]:
    """Parse program text into the initial memory image."""
    tokens = [tok.strip() for tok in text.strip().split(',')]
    if tokens and tokens[-1] == '' and len(tokens) > 1:
        tokens.pop()  # trailing comma
    if tokens == ['']:
        raise ProgramFormatError("Program is empty")

    program = []
    for index, tok in enumerate(tokens):
        if not _INT_RE.match(tok):
            raise ProgramFormatError("not an integer", index, tok)
        program.append(int(tok))

    log.debug("Parsed program: %d cells", len(program))
    return program


def load_program(path: Union[str, Path]) -> List[int]:
    """Read and parse a program file."""
    return parse_program(Path(path).read_text(encoding='utf-8'))


def patch(program: Sequence[int], changes: Dict[int, int]) -> List[int]:
    """Return a copy of program with {address: value} substitutions applied.

    This is the usual way to set a program's inputs before a pure
    calculation run (e.g. addresses 1 and 2 for noun/verb).
    """
    patched = list(program)
    for address, value in changes.items():
        if not 0 <= address < len(patched):
            raise SegFault(address)
        patched[address] = value
    return patched
