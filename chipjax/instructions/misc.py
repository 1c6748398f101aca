"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.constants import FONT_START, FONT_GLYPH_SIZE, MEMORY_SIZE, NUM_REGISTERS
from chipjax.instructions.system import execute_unknown


def _addresses(state: EmulatorState, count: int) -> jnp.ndarray:
    """Addresses I, I+1, ... wrapped into memory."""
    return (state.I.astype(jnp.int32) + jnp.arange(count)) % MEMORY_SIZE


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Without a pressed key the program counter is wound back, so the next step runs
    this instruction again.
    """
    def key_pressed_action(state):
        pressed_key = jnp.argmax(state.keypad).astype(jnp.uint8)
        return state.replace(V=state.V.at[instruction.x].set(pressed_key))

    def wait_action(state):
        return state.replace(pc=state.pc - 2)

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, wait_action, state)


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I. 16-bit wraparound, VF untouched."""
    return state.replace(I=state.I + state.V[instruction.x].astype(jnp.uint16))


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + state.V[instruction.x].astype(jnp.uint16) * FONT_GLYPH_SIZE
    return state.replace(I=font_address)


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    new_memory = state.memory.at[_addresses(state, 3)].set(digits)
    return state.replace(memory=new_memory)


def _advance_index(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    increment = state.quirks.load_store_increment
    if increment == "one":
        return state.I + 1
    if increment == "x_plus_one":
        return state.I + jnp.asarray(instruction.x, dtype=jnp.uint16) + 1
    if increment == "none":
        return state.I
    raise ValueError(f"Unknown load_store_increment '{increment}'")


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    addresses = _addresses(state, NUM_REGISTERS)
    new_memory_values = jnp.where(register_mask, state.V, state.memory[addresses])
    new_memory = state.memory.at[addresses].set(new_memory_values)
    return state.replace(memory=new_memory, I=_advance_index(state, instruction))


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    memory_values = state.memory[_addresses(state, NUM_REGISTERS)]
    new_V = jnp.where(register_mask, memory_values, state.V)
    return state.replace(V=new_V, I=_advance_index(state, instruction))


_MISC_HANDLERS = {
    0x07: execute_get_delay_timer,
    0x0A: execute_wait_for_key,
    0x15: execute_set_delay_timer,
    0x18: execute_set_sound_timer,
    0x1E: execute_add_to_index,
    0x29: execute_font_character,
    0x33: execute_bcd_conversion,
    0x55: execute_store_registers,
    0x65: execute_load_registers,
}

# Low byte -> branch index; every unlisted byte selects the trailing unknown handler
_MISC_BRANCHES = list(_MISC_HANDLERS.values()) + [execute_unknown]
_MISC_SLOTS = jnp.array(
    [list(_MISC_HANDLERS).index(nn) if nn in _MISC_HANDLERS else len(_MISC_HANDLERS)
     for nn in range(256)],
    dtype=jnp.int32,
)


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch FXNN instructions on their low byte."""
    return jax.lax.switch(
        _MISC_SLOTS[instruction.nn],
        _MISC_BRANCHES,
        state, instruction
    )
