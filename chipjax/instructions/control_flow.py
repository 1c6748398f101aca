"""CHIP-8 control flow instructions."""

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import EmulatorState, halt
from chipjax.decode import DecodedInstruction
from chipjax.constants import ADDRESS_MASK, HALT_STACK_OVERFLOW
from chipjax.stack import push, is_full
from chipjax.instructions.system import execute_unknown


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.asarray(instruction.nnn, dtype=jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN. Calling with a full stack halts the machine."""
    def _push_and_jump(state):
        state = state.replace(stack=push(state.stack, state.pc))
        return execute_jump(state, instruction)

    return jax.lax.cond(
        is_full(state.stack),
        lambda state: halt(state, HALT_STACK_OVERFLOW),
        _push_and_jump,
        state
    )


def make_skip_instruction(condition_fn, requires_zero_n=False):
    """Factory for skip instructions.

    With ``requires_zero_n`` the low nibble must be 0 (5XY0, 9XY0); any other value
    is not an instruction.
    """
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        condition = condition_fn(state, instruction)
        return jax.lax.cond(
            condition,
            lambda s: s.replace(pc=s.pc + 2),
            lambda s: s,
            state
        )

    if not requires_zero_n:
        return skip_instruction

    def checked_skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        return jax.lax.cond(
            instruction.n == 0,
            skip_instruction,
            execute_unknown,
            state, instruction
        )
    return checked_skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y],
    requires_zero_n=True,
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y],
    requires_zero_n=True,
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to NNN + V0, or XNN + VX with the ``jump_offset_vx`` quirk."""
    register = instruction.x if state.quirks.jump_offset_vx else 0
    offset = jnp.asarray(state.V[register], dtype=jnp.uint16)
    jump_address = (jnp.asarray(instruction.nnn, dtype=jnp.uint16) + offset) & ADDRESS_MASK
    return state.replace(pc=jump_address)


def execute_skip_if_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """EX9E/EXA1 - Skip if key pressed/not pressed."""

    def _skip_on_key(state, instruction):
        key_index = state.V[instruction.x] & 0xF
        key_pressed = state.keypad[key_index]
        is_not_instruction = (instruction.nn == 0xA1)
        condition = key_pressed ^ is_not_instruction

        return jax.lax.cond(
            condition,
            lambda state: state.replace(pc=state.pc + 2),
            lambda state: state,
            state
        )

    return jax.lax.cond(
        (instruction.nn == 0x9E) | (instruction.nn == 0xA1),
        _skip_on_key,
        execute_unknown,
        state, instruction
    )
