"""CHIP-8 register load and index instructions."""

import jax
import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction


def execute_set(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """6XNN - Set VX = NN."""
    value = jnp.asarray(instruction.nn, dtype=jnp.uint8)
    return state.replace(V=state.V.at[instruction.x].set(value))


def execute_add(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """7XNN - Add NN to VX, wrapping at 256. VF is not touched."""
    total = jnp.asarray(state.V[instruction.x], dtype=jnp.uint16) + instruction.nn
    value = jnp.asarray(total & 0xFF, dtype=jnp.uint8)
    return state.replace(V=state.V.at[instruction.x].set(value))


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """ANNN - Set I = NNN."""
    return state.replace(I=jnp.asarray(instruction.nnn, dtype=jnp.uint16))


def execute_random(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """CXNN - Set VX = random byte & NN."""
    key, subkey = jax.random.split(state.rng)
    random_value = jax.random.bits(subkey, shape=(), dtype=jnp.uint8)
    value = random_value & jnp.asarray(instruction.nn, dtype=jnp.uint8)
    return state.replace(V=state.V.at[instruction.x].set(value), rng=key)
