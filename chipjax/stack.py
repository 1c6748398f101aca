"""CHIP-8 stack operations.

``push`` and ``pop`` assume the caller has already checked ``is_full`` / ``is_empty``;
the instruction handlers turn those conditions into a halt.
"""

import jax.numpy as jnp
from chipjax.constants import ADDRESS_MASK, STACK_SIZE
from chipjax.state import StackState


def is_full(stack: StackState) -> jnp.ndarray:
    """True when another push would exceed the stack capacity."""
    return stack.pointer >= STACK_SIZE


def is_empty(stack: StackState) -> jnp.ndarray:
    """True when there is no return address to pop."""
    return stack.pointer == 0


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack."""
    masked_address = jnp.asarray(address & ADDRESS_MASK, dtype=jnp.uint16)
    new_data = stack.data.at[stack.pointer].set(masked_address)
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    new_pointer = stack.pointer - 1
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
