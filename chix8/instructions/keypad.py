"""CHIP-8 keypad instructions (EX9E, EXA1, FX0A)."""

import jax
import jax.lax
import jax.numpy as jnp
from chix8.state import EmulatorState
from chix8.decode import DecodedInstruction
from chix8.constants import NO_KEY


def _latched_key_matches(state: EmulatorState, instruction: DecodedInstruction):
    wanted = jnp.astype(state.V[instruction.x] & 0xF, jnp.int32)
    return state.key == wanted


def execute_skip_if_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """EX9E - Skip if the latched key equals VX."""
    return jax.lax.cond(
        _latched_key_matches(state, instruction),
        lambda state: state.replace(pc=state.pc + 2),
        lambda state: state,
        state
    )


def execute_skip_if_not_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """EXA1 - Skip if the latched key is not VX (or no key is latched)."""
    return jax.lax.cond(
        _latched_key_matches(state, instruction),
        lambda state: state,
        lambda state: state.replace(pc=state.pc + 2),
        state
    )


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press (blocking).

    With nothing latched the PC is rewound onto this instruction, so each
    unresolved cycle makes zero net progress.
    """
    def key_pressed_action(state):
        return state.replace(V=state.V.at[instruction.x].set(jnp.astype(state.key, jnp.uint8)))

    def wait_action(state):
        return state.replace(pc=state.pc - 2)

    return jax.lax.cond(state.key != NO_KEY, key_pressed_action, wait_action, state)
