"""Tests for the initial machine state."""

import jax
import jax.numpy as jnp
from chix8 import create_state, Key, FONT_START, PROGRAM_START, NO_KEY
from chix8.constants import FONT_DATA


def test_font_loaded(fresh_state):
    font = fresh_state.memory[FONT_START:FONT_START + len(FONT_DATA)]
    assert [int(b) for b in font] == FONT_DATA


def test_rest_of_memory_is_zero(fresh_state):
    assert jnp.all(fresh_state.memory[:FONT_START] == 0)
    assert jnp.all(fresh_state.memory[FONT_START + len(FONT_DATA):] == 0)


def test_initial_registers(fresh_state):
    assert fresh_state.pc == PROGRAM_START
    assert fresh_state.I == 0
    assert jnp.all(fresh_state.V == 0)
    assert fresh_state.stack.pointer == 0
    assert fresh_state.delay_timer == 0
    assert fresh_state.sound_timer == 0
    assert fresh_state.key == NO_KEY
    assert not bool(fresh_state.frame_ready)
    assert fresh_state.display.shape == (64, 32)
    assert not jnp.any(fresh_state.display)


def test_state_is_immutable(fresh_state):
    updated = fresh_state.replace(V=fresh_state.V.at[0].set(1))
    assert fresh_state.V[0] == 0
    assert updated.V[0] == 1


def test_rng_from_seed():
    state = create_state(jax.random.PRNGKey(42))
    assert jnp.array_equal(state.rng, jax.random.PRNGKey(42))


def test_key_enum():
    assert Key.NONE == NO_KEY
    assert Key.KEY_F == 0xF
    assert len([key for key in Key if key != Key.NONE]) == 16
