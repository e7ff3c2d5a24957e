"""
Decoder tests: opcode table, parameter modes, opcode profiles, and the
fault types they raise.
"""

import itertools

import pytest

from intcode.decoder import (BASIC, FULL, OPCODES, Mode, OpCode, decode,
                             get_profile, pop_modes, split_word)
from intcode.errors import (InvalidMode, InvalidOpCode, InvalidWriteMode,
                            ReadingNotSupported, SegFault, WritingNotSupported)


class TestOpCodeTable:
    def test_success(self):
        assert OpCode.from_value(1) is OpCode.ADD
        assert OpCode.from_value(2) is OpCode.MULTIPLY
        assert OpCode.from_value(3) is OpCode.INPUT
        assert OpCode.from_value(4) is OpCode.OUTPUT
        assert OpCode.from_value(5) is OpCode.JUMP_IF_TRUE
        assert OpCode.from_value(6) is OpCode.JUMP_IF_FALSE
        assert OpCode.from_value(7) is OpCode.LESS_THAN
        assert OpCode.from_value(8) is OpCode.EQUALS
        assert OpCode.from_value(99) is OpCode.HALT

    def test_error(self):
        with pytest.raises(InvalidOpCode) as exc:
            OpCode.from_value(55)
        assert exc.value == InvalidOpCode(55)

    def test_every_opcode_has_an_entry(self):
        assert set(OPCODES) == set(OpCode)

    @pytest.mark.parametrize("opcode, count", [
        (OpCode.ADD, 3), (OpCode.MULTIPLY, 3), (OpCode.INPUT, 1),
        (OpCode.OUTPUT, 1), (OpCode.JUMP_IF_TRUE, 2), (OpCode.JUMP_IF_FALSE, 2),
        (OpCode.LESS_THAN, 3), (OpCode.EQUALS, 3), (OpCode.HALT, 0),
    ])
    def test_operand_counts(self, opcode, count):
        assert opcode.operand_count == count


class TestModes:
    def test_from_digit(self):
        assert Mode.from_digit(0) is Mode.POSITION
        assert Mode.from_digit(1) is Mode.IMMEDIATE

    def test_invalid_digit(self):
        with pytest.raises(InvalidMode) as exc:
            Mode.from_digit(7)
        assert exc.value.digit == 7

    def test_pop_modes_defaults_to_position(self):
        modes = pop_modes(10)
        assert [next(modes) for _ in range(4)] == [
            Mode.POSITION, Mode.IMMEDIATE, Mode.POSITION, Mode.POSITION]

    def test_split_word(self):
        assert split_word(1002) == (2, 10)
        assert split_word(99) == (99, 0)
        assert split_word(-1002) == (-2, -10)


class TestDecode:
    def test_mixed_modes(self):
        instr = decode(1002)
        assert instr.opcode is OpCode.MULTIPLY
        assert instr.modes == (Mode.POSITION, Mode.IMMEDIATE, Mode.POSITION)
        assert instr.width == 4
        assert instr.mnemonic == "MUL"

    def test_halt_has_no_operands(self):
        instr = decode(99)
        assert instr.opcode is OpCode.HALT
        assert instr.modes == ()
        assert instr.width == 1

    def test_missing_digits_are_position(self):
        assert decode(3).modes == (Mode.POSITION,)
        assert decode(1).modes == (Mode.POSITION,) * 3

    def test_extra_digits_are_ignored(self):
        assert decode(11105).modes == (Mode.IMMEDIATE, Mode.IMMEDIATE)
        assert decode(20099).opcode is OpCode.HALT

    def test_decoding_property(self):
        """opcode == W % 100 and mode k is the k-th digit of W // 100."""
        for opcode in OpCode:
            n = opcode.operand_count
            for digits in itertools.product((0, 1), repeat=n):
                mode_part = sum(d * 10 ** k for k, d in enumerate(digits))
                instr = decode(opcode + 100 * mode_part)
                assert instr.opcode is opcode
                assert instr.modes == tuple(Mode(d) for d in digits)

    @pytest.mark.parametrize("word, value", [(0, 0), (55, 55), (9, 9), (100, 0)])
    def test_invalid_opcode(self, word, value):
        with pytest.raises(InvalidOpCode) as exc:
            decode(word)
        assert exc.value == InvalidOpCode(value)

    @pytest.mark.parametrize("word, value", [(-1, -1), (-99, -99), (-1001, -1)])
    def test_negative_words_never_wrap(self, word, value):
        with pytest.raises(InvalidOpCode) as exc:
            decode(word)
        assert exc.value == InvalidOpCode(value)

    @pytest.mark.parametrize("word", [201, 1201, 21101])
    def test_invalid_mode(self, word):
        with pytest.raises(InvalidMode) as exc:
            decode(word)
        assert exc.value == InvalidMode(2)


class TestProfiles:
    def test_basic_subset(self):
        assert BASIC == {OpCode.ADD, OpCode.MULTIPLY, OpCode.HALT}
        assert BASIC < FULL

    def test_disabled_opcode(self):
        with pytest.raises(InvalidOpCode) as exc:
            decode(3, BASIC)
        assert exc.value.value == 3

    def test_get_profile(self):
        assert get_profile("full") == FULL
        assert get_profile("basic") == BASIC

    def test_unknown_profile(self):
        with pytest.raises(KeyError, match="basic, full"):
            get_profile("day9")


class TestErrors:
    def test_repr_for_reports(self):
        assert repr(SegFault(120)) == "SegFault(120)"
        assert repr(InvalidOpCode(55)) == "InvalidOpCode(55)"
        assert repr(ReadingNotSupported()) == "ReadingNotSupported"

    def test_messages(self):
        assert str(SegFault(120)) == "Tried to read out of bounds address 120"
        assert str(InvalidMode(2)) == "Invalid Parameter Mode 2"
        assert str(InvalidWriteMode(Mode.IMMEDIATE)) == "Invalid Write Mode Immediate"
        assert str(WritingNotSupported()) == "Writing is not supported"

    def test_equality_by_kind_and_payload(self):
        assert SegFault(3) == SegFault(3)
        assert SegFault(3) != SegFault(4)
        assert SegFault(3) != InvalidOpCode(3)
        assert ReadingNotSupported() == ReadingNotSupported()
        assert ReadingNotSupported() != WritingNotSupported()
