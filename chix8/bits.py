"""Operand field extraction from 16-bit instruction words.

All helpers work on plain ints as well as on JAX integer arrays.
"""


def get_group(instruction):
    """Top nibble, selects the instruction group."""
    return (instruction & 0xF000) >> 12


def get_x(instruction):
    """Lower nibble of the high byte (VX register index)."""
    return (instruction & 0x0F00) >> 8


def get_y(instruction):
    """Upper nibble of the low byte (VY register index)."""
    return (instruction & 0x00F0) >> 4


def get_n(instruction):
    """Lowest nibble (4-bit immediate)."""
    return instruction & 0x000F


def get_kk(instruction):
    """Low byte (8-bit immediate)."""
    return instruction & 0x00FF


def get_nnn(instruction):
    """Lowest 12 bits (address)."""
    return instruction & 0x0FFF
