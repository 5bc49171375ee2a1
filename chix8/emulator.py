"""Main CHIP-8 emulator execution engine.

The traced core (``_fetch``, ``_execute``, ``_cycle``) never raises: machine
faults are recorded with ``checkify`` and the public wrappers below turn them
into ``MachineFault`` once the step has finished.
"""

import jax
import jax.lax
import jax.numpy as jnp
import numpy as np
from jax.experimental import checkify

from chix8.state import EmulatorState
from chix8.decode import Operation, decode
from chix8.constants import PROGRAM_START, MEMORY_SIZE, MAX_ROM_SIZE
from chix8.errors import MachineFault, RomTooLargeError
from chix8.instructions.system import no_op, execute_clear_screen, execute_return
from chix8.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset
)
from chix8.instructions.alu import (
    execute_alu_set, execute_alu_or, execute_alu_and, execute_alu_xor, execute_alu_add,
    execute_alu_sub, execute_alu_shift_right, execute_alu_subn, execute_alu_shift_left
)
from chix8.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chix8.instructions.display import execute_display
from chix8.instructions.keypad import execute_skip_if_key, execute_skip_if_not_key, execute_wait_for_key
from chix8.instructions.misc import (
    execute_get_delay_timer, execute_set_delay_timer, execute_set_sound_timer,
    execute_add_to_index, execute_font_character, execute_bcd_conversion,
    execute_store_registers, execute_load_registers
)

INSTRUCTION_HANDLERS = {
    Operation.SYS: no_op,
    Operation.CLS: execute_clear_screen,
    Operation.RET: execute_return,
    Operation.JP: execute_jump,
    Operation.CALL: execute_call,
    Operation.SE_VX_BYTE: execute_skip_if_equal_immediate,
    Operation.SNE_VX_BYTE: execute_skip_if_not_equal_immediate,
    Operation.SE_VX_VY: execute_skip_if_equal_register,
    Operation.LD_VX_BYTE: execute_set,
    Operation.ADD_VX_BYTE: execute_add,
    Operation.LD_VX_VY: execute_alu_set,
    Operation.OR: execute_alu_or,
    Operation.AND: execute_alu_and,
    Operation.XOR: execute_alu_xor,
    Operation.ADD_VX_VY: execute_alu_add,
    Operation.SUB: execute_alu_sub,
    Operation.SHR: execute_alu_shift_right,
    Operation.SUBN: execute_alu_subn,
    Operation.SHL: execute_alu_shift_left,
    Operation.SNE_VX_VY: execute_skip_if_not_equal_register,
    Operation.LD_I_ADDR: execute_set_index,
    Operation.JP_V0: execute_jump_with_offset,
    Operation.RND: execute_random,
    Operation.DRW: execute_display,
    Operation.SKP: execute_skip_if_key,
    Operation.SKNP: execute_skip_if_not_key,
    Operation.LD_VX_DT: execute_get_delay_timer,
    Operation.LD_VX_K: execute_wait_for_key,
    Operation.LD_DT_VX: execute_set_delay_timer,
    Operation.LD_ST_VX: execute_set_sound_timer,
    Operation.ADD_I_VX: execute_add_to_index,
    Operation.LD_F_VX: execute_font_character,
    Operation.LD_B_VX: execute_bcd_conversion,
    Operation.LD_I_VX: execute_store_registers,
    Operation.LD_VX_I: execute_load_registers,
}

# lax.switch needs the branches ordered by dispatch index
_BRANCHES = [INSTRUCTION_HANDLERS[operation] for operation in Operation]


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def _fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    checkify.check(jnp.astype(state.pc, jnp.int32) + 1 < MEMORY_SIZE,
                   "fetch out of range: pc={}", state.pc)
    instruction = _pack_u16(state.memory[state.pc], state.memory[state.pc + 1])
    return state.replace(pc=state.pc + 2), instruction


def _execute(state: EmulatorState, instruction) -> EmulatorState:
    decoded_instruction = decode(instruction)
    state = jax.lax.switch(decoded_instruction.operation, _BRANCHES, state, decoded_instruction)
    frame_ready = ((decoded_instruction.operation == int(Operation.CLS))
                   | (decoded_instruction.operation == int(Operation.DRW)))
    return state.replace(frame_ready=frame_ready)


def _cycle(state: EmulatorState) -> EmulatorState:
    state, instruction = _fetch(state)
    return _execute(state, instruction)


def _run_cycles(state: EmulatorState, n: int) -> EmulatorState:
    state, _ = jax.lax.scan(lambda s, _: (_cycle(s), None), state, length=n)
    return state


def _run_until_frame(state: EmulatorState, max_cycles) -> tuple[EmulatorState, jnp.ndarray]:
    def cond_fn(carry):
        state, count = carry
        return (count < max_cycles) & ~state.frame_ready

    def body_fn(carry):
        state, count = carry
        return _cycle(state), count + 1

    carry = (state.replace(frame_ready=jnp.zeros((), dtype=jnp.bool_)), jnp.zeros((), dtype=jnp.int32))
    return jax.lax.while_loop(cond_fn, body_fn, carry)


_checked_fetch = jax.jit(checkify.checkify(_fetch))
_checked_execute = jax.jit(checkify.checkify(_execute))
_checked_cycle = jax.jit(checkify.checkify(_cycle))
_checked_run_cycles = jax.jit(checkify.checkify(_run_cycles), static_argnums=1)
_checked_run_until_frame = jax.jit(checkify.checkify(_run_until_frame))


def _raise_on_fault(error: checkify.Error) -> None:
    message = error.get()
    if message is not None:
        raise MachineFault(message)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory, advancing PC past it."""
    error, (state, instruction) = _checked_fetch(state)
    _raise_on_fault(error)
    return state, instruction


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    The PC is expected to already point past ``instruction``.
    """
    error, state = _checked_execute(state, instruction)
    _raise_on_fault(error)
    return state


def cycle(state: EmulatorState) -> EmulatorState:
    """Retire exactly one instruction: fetch, decode, execute."""
    error, state = _checked_cycle(state)
    _raise_on_fault(error)
    return state


def run_cycles(state: EmulatorState, n: int) -> EmulatorState:
    """Retire ``n`` instructions."""
    if n <= 0:
        return state
    error, state = _checked_run_cycles(state, n)
    _raise_on_fault(error)
    return state


def run_until_frame(state: EmulatorState, max_cycles: int) -> tuple[EmulatorState, int]:
    """Run until a clear or draw retires, or ``max_cycles`` is spent.

    Returns the new state and the number of cycles executed. ``frame_ready``
    on the returned state tells which of the two ended the run.
    """
    error, (state, count) = _checked_run_until_frame(state, max_cycles)
    _raise_on_fault(error)
    return state, int(count)


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement delay and sound timers toward zero.

    The interpreter never calls this itself; the host drives it at 60 Hz.
    """
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def snapshot_display(state: EmulatorState) -> np.ndarray:
    """Copy the (64, 32) display into a host-owned numpy array."""
    return np.array(state.display, dtype=np.bool_)


def load_rom_bytes(state: EmulatorState, rom_data: bytes) -> EmulatorState:
    """Copy ROM bytes into CHIP-8 memory starting at 0x200."""
    if len(rom_data) > MAX_ROM_SIZE:
        raise RomTooLargeError(len(rom_data), MAX_ROM_SIZE)
    rom_array = jnp.asarray(np.frombuffer(bytes(rom_data), dtype=np.uint8))
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_rom_bytes(state, rom_data)
