"""CHIP-8 instruction decoding."""

from enum import IntEnum

import jax.numpy as jnp
from chex import dataclass

from chix8.bits import get_group, get_x, get_y, get_n, get_kk, get_nnn


class Operation(IntEnum):
    """Named CHIP-8 operations. The value is the dispatch index."""
    SYS = 0           # 0nnn - ignored machine-code call, also every undefined word
    CLS = 1           # 00E0
    RET = 2           # 00EE
    JP = 3            # 1nnn
    CALL = 4          # 2nnn
    SE_VX_BYTE = 5    # 3xkk
    SNE_VX_BYTE = 6   # 4xkk
    SE_VX_VY = 7      # 5xy0
    LD_VX_BYTE = 8    # 6xkk
    ADD_VX_BYTE = 9   # 7xkk
    LD_VX_VY = 10     # 8xy0
    OR = 11           # 8xy1
    AND = 12          # 8xy2
    XOR = 13          # 8xy3
    ADD_VX_VY = 14    # 8xy4
    SUB = 15          # 8xy5
    SHR = 16          # 8xy6
    SUBN = 17         # 8xy7
    SHL = 18          # 8xyE
    SNE_VX_VY = 19    # 9xy0
    LD_I_ADDR = 20    # Annn
    JP_V0 = 21        # Bnnn
    RND = 22          # Cxkk
    DRW = 23          # Dxyn
    SKP = 24          # Ex9E
    SKNP = 25         # ExA1
    LD_VX_DT = 26     # Fx07
    LD_VX_K = 27      # Fx0A
    LD_DT_VX = 28     # Fx15
    LD_ST_VX = 29     # Fx18
    ADD_I_VX = 30     # Fx1E
    LD_F_VX = 31      # Fx29
    LD_B_VX = 32      # Fx33
    LD_I_VX = 33      # Fx55
    LD_VX_I = 34      # Fx65


def _lookup_table(size: int, entries: dict) -> jnp.ndarray:
    table = [int(Operation.SYS)] * size
    for index, operation in entries.items():
        table[index] = int(operation)
    return jnp.array(table, dtype=jnp.int32)


# Groups 0x0, 0x8, 0xE and 0xF are resolved by the sub-tables below
_PRIMARY = _lookup_table(16, {
    0x1: Operation.JP,
    0x2: Operation.CALL,
    0x3: Operation.SE_VX_BYTE,
    0x4: Operation.SNE_VX_BYTE,
    0x5: Operation.SE_VX_VY,
    0x6: Operation.LD_VX_BYTE,
    0x7: Operation.ADD_VX_BYTE,
    0x9: Operation.SNE_VX_VY,
    0xA: Operation.LD_I_ADDR,
    0xB: Operation.JP_V0,
    0xC: Operation.RND,
    0xD: Operation.DRW,
})

_SYSTEM = _lookup_table(256, {
    0xE0: Operation.CLS,
    0xEE: Operation.RET,
})

_ALU = _lookup_table(16, {
    0x0: Operation.LD_VX_VY,
    0x1: Operation.OR,
    0x2: Operation.AND,
    0x3: Operation.XOR,
    0x4: Operation.ADD_VX_VY,
    0x5: Operation.SUB,
    0x6: Operation.SHR,
    0x7: Operation.SUBN,
    0xE: Operation.SHL,
})

_KEYPAD = _lookup_table(256, {
    0x9E: Operation.SKP,
    0xA1: Operation.SKNP,
})

_MISC = _lookup_table(256, {
    0x07: Operation.LD_VX_DT,
    0x0A: Operation.LD_VX_K,
    0x15: Operation.LD_DT_VX,
    0x18: Operation.LD_ST_VX,
    0x1E: Operation.ADD_I_VX,
    0x29: Operation.LD_F_VX,
    0x33: Operation.LD_B_VX,
    0x55: Operation.LD_I_VX,
    0x65: Operation.LD_VX_I,
})


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    operation: int  # Operation dispatch index
    x: int          # Second nibble (VX register)
    y: int          # Third nibble (VY register)
    n: int          # Fourth nibble (4-bit immediate)
    kk: int         # Last byte (8-bit immediate)
    nnn: int        # Last 12 bits (12-bit address)


def decode_operation(instruction):
    """Map a 16-bit instruction word to its Operation index.

    Words matching no defined pattern decode to ``Operation.SYS``.
    Works on Python ints and traced values alike.
    """
    instruction = jnp.asarray(instruction, dtype=jnp.uint16)
    group = get_group(instruction)
    low_byte = get_kk(instruction)
    low_nibble = get_n(instruction)

    return jnp.select(
        [group == 0x0, group == 0x8, group == 0xE, group == 0xF],
        [_SYSTEM[low_byte], _ALU[low_nibble], _KEYPAD[low_byte], _MISC[low_byte]],
        default=_PRIMARY[group],
    )


def decode(instruction) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    instruction = jnp.asarray(instruction, dtype=jnp.uint16)
    return DecodedInstruction(
        raw=instruction,
        operation=decode_operation(instruction),
        x=get_x(instruction),
        y=get_y(instruction),
        n=get_n(instruction),
        kk=get_kk(instruction),
        nnn=get_nnn(instruction),
    )
