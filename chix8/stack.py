"""CHIP-8 stack operations."""

import jax.numpy as jnp
from jax.experimental import checkify

from chix8.constants import ADDRESS_MASK, STACK_SIZE
from chix8.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack."""
    checkify.check(stack.pointer < STACK_SIZE,
                   f"call stack overflow: more than {STACK_SIZE} nested calls")
    masked_address = jnp.astype(address & ADDRESS_MASK, jnp.uint16)
    slot = jnp.minimum(stack.pointer, STACK_SIZE - 1)
    new_data = stack.data.at[slot].set(masked_address)
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    checkify.check(stack.pointer > 0, "call stack underflow: return with empty stack")
    new_pointer = jnp.maximum(stack.pointer - 1, 0)
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
