"""CHIP-8 memory and register operations."""

import jax
import jax.numpy as jnp
from jax.experimental import checkify

from chix8.state import EmulatorState
from chix8.decode import DecodedInstruction
from chix8.constants import MEMORY_SIZE


def check_index_range(state: EmulatorState, length) -> None:
    """Fail unless ``I .. I + length - 1`` lies inside memory."""
    last = jnp.astype(state.I, jnp.int32) + length - 1
    checkify.check(last < MEMORY_SIZE,
                   "memory access out of range: I={} length={}", state.I, jnp.asarray(length, jnp.int32))


def execute_set(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """6XKK - Set VX = KK."""
    return state.replace(V=state.V.at[instruction.x].set(jnp.astype(instruction.kk, jnp.uint8)))


def execute_add(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """7XKK - Add KK to VX, no carry flag."""
    total = state.V[instruction.x] + jnp.astype(instruction.kk, jnp.uint8)
    return state.replace(V=state.V.at[instruction.x].set(total))


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """ANNN - Set I = NNN."""
    return state.replace(I=jnp.astype(instruction.nnn, jnp.uint16))


def execute_random(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """CXKK - Set VX = random & KK."""
    key, subkey = jax.random.split(state.rng)
    random_value = jax.random.randint(subkey, shape=(), minval=0, maxval=256, dtype=jnp.int32)
    masked = jnp.astype(random_value & instruction.kk, jnp.uint8)
    return state.replace(V=state.V.at[instruction.x].set(masked), rng=key)
