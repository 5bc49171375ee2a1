"""Tests for instruction decoding."""

import pytest
from chix8 import decode, decode_operation, Operation
from chix8.bits import get_group, get_x, get_y, get_n, get_kk, get_nnn


@pytest.mark.parametrize("instruction, operation", [
    (0x00E0, Operation.CLS),
    (0x00EE, Operation.RET),
    (0x0123, Operation.SYS),
    (0x1ABC, Operation.JP),
    (0x2ABC, Operation.CALL),
    (0x3A12, Operation.SE_VX_BYTE),
    (0x4A12, Operation.SNE_VX_BYTE),
    (0x5AB0, Operation.SE_VX_VY),
    (0x6A12, Operation.LD_VX_BYTE),
    (0x7A12, Operation.ADD_VX_BYTE),
    (0x8AB0, Operation.LD_VX_VY),
    (0x8AB1, Operation.OR),
    (0x8AB2, Operation.AND),
    (0x8AB3, Operation.XOR),
    (0x8AB4, Operation.ADD_VX_VY),
    (0x8AB5, Operation.SUB),
    (0x8AB6, Operation.SHR),
    (0x8AB7, Operation.SUBN),
    (0x8ABE, Operation.SHL),
    (0x9AB0, Operation.SNE_VX_VY),
    (0xAABC, Operation.LD_I_ADDR),
    (0xBABC, Operation.JP_V0),
    (0xCA12, Operation.RND),
    (0xDAB5, Operation.DRW),
    (0xEA9E, Operation.SKP),
    (0xEAA1, Operation.SKNP),
    (0xFA07, Operation.LD_VX_DT),
    (0xFA0A, Operation.LD_VX_K),
    (0xFA15, Operation.LD_DT_VX),
    (0xFA18, Operation.LD_ST_VX),
    (0xFA1E, Operation.ADD_I_VX),
    (0xFA29, Operation.LD_F_VX),
    (0xFA33, Operation.LD_B_VX),
    (0xFA55, Operation.LD_I_VX),
    (0xFA65, Operation.LD_VX_I),
])
def test_decode_operation(instruction, operation):
    assert int(decode_operation(instruction)) == operation


@pytest.mark.parametrize("instruction", [
    0x8AB8, 0x8ABF, 0xEA00, 0xEA9F, 0xFA00, 0xFAFF, 0x00E1, 0x00FF,
])
def test_undefined_words_decode_to_sys(instruction):
    """Undefined words fall through to the ignored machine-code call."""
    assert int(decode_operation(instruction)) == Operation.SYS


def test_every_operation_is_reachable():
    """Each Operation value is produced by at least one word of its group."""
    seen = {int(decode_operation(group << 12 | low))
            for group in range(16) for low in (0x000, 0x0E0, 0x0EE, 0x007, 0x00A, 0x015,
                                               0x018, 0x01E, 0x029, 0x033, 0x055, 0x065,
                                               0x09E, 0x0A1, 0x001, 0x002, 0x003, 0x004,
                                               0x005, 0x006, 0x00E)}
    assert seen == {int(operation) for operation in Operation}


def test_decode_operands():
    decoded = decode(0xD12F)
    assert int(decoded.raw) == 0xD12F
    assert int(decoded.operation) == Operation.DRW
    assert int(decoded.x) == 0x1
    assert int(decoded.y) == 0x2
    assert int(decoded.n) == 0xF
    assert int(decoded.kk) == 0x2F
    assert int(decoded.nnn) == 0x12F


def test_bit_helpers_on_ints():
    instruction = 0xABCD
    assert get_group(instruction) == 0xA
    assert get_x(instruction) == 0xB
    assert get_y(instruction) == 0xC
    assert get_n(instruction) == 0xD
    assert get_kk(instruction) == 0xCD
    assert get_nnn(instruction) == 0xBCD
