"""
Intcode Computer: Fault Taxonomy

Every fault the interpreter can raise. All of them are fatal to the run
that raised them: the computer never retries or recovers, it stops at the
first fault and lets the exception travel up to the caller unchanged.

  InvalidOpCode(value)     fetched opcode not in the enabled table
  InvalidMode(digit)       parameter-mode digit outside {0, 1}
  InvalidWriteMode(mode)   write through an immediate-mode parameter
  SegFault(address)        read/write outside the memory image
  ReadingNotSupported      input channel is not wired or has no value
  WritingNotSupported      output channel is not wired or refused the value

Faults compare equal when their kind and payload match, and repr() as
``SegFault(120)`` so callers can print them straight into a report line.
"""

__all__ = [
    'IntcodeError', 'InvalidOpCode', 'InvalidMode', 'InvalidWriteMode',
    'SegFault', 'ReadingNotSupported', 'WritingNotSupported',
]


class IntcodeError(Exception):
    """Base class for every interpreter fault."""

    def _payload(self) -> tuple:
        return ()

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._payload() == other._payload()

    def __hash__(self):
        return hash((type(self).__name__,) + self._payload())

    def __repr__(self):
        args = ', '.join(str(p) for p in self._payload())
        return f"{type(self).__name__}({args})" if args else type(self).__name__


class InvalidOpCode(IntcodeError):
    def __init__(self, value: int):
        self.value = value
        super().__init__(f"Invalid OpCode {value}")

    def _payload(self) -> tuple:
        return (self.value,)


class InvalidMode(IntcodeError):
    def __init__(self, digit: int):
        self.digit = digit
        super().__init__(f"Invalid Parameter Mode {digit}")

    def _payload(self) -> tuple:
        return (self.digit,)


class InvalidWriteMode(IntcodeError):
    """Raised when an instruction tries to store through an immediate operand."""

    def __init__(self, mode):
        self.mode = mode
        name = getattr(mode, 'label', mode)
        super().__init__(f"Invalid Write Mode {name}")

    def _payload(self) -> tuple:
        return (getattr(self.mode, 'label', self.mode),)


class SegFault(IntcodeError):
    """Raised on any memory access outside the program image.

    Negative addresses are out of bounds too; they never wrap around.
    """

    def __init__(self, address: int):
        self.address = address
        super().__init__(f"Tried to read out of bounds address {address}")

    def _payload(self) -> tuple:
        return (self.address,)


class ReadingNotSupported(IntcodeError):
    def __init__(self):
        super().__init__("Reading is not supported")


class WritingNotSupported(IntcodeError):
    def __init__(self):
        super().__init__("Writing is not supported")
