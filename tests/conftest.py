"""Test configuration and fixtures for CHIP-8 interpreter tests."""

import pytest
import jax.numpy as jnp
from chix8 import create_state, load_rom_bytes


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def rom_file(tmp_path):
    """Write ROM bytes to a temporary file and return its path."""
    def _write(rom_bytes, name="test.ch8"):
        path = tmp_path / name
        path.write_bytes(bytes(rom_bytes))
        return str(path)
    return _write


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def program_state(words):
    """Fresh state with 16-bit instruction words loaded at 0x200."""
    rom = bytearray()
    for word in words:
        rom += bytes([(word >> 8) & 0xFF, word & 0xFF])
    return load_rom_bytes(create_state(), bytes(rom))
