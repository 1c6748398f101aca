"""CHIP-8 system instructions (0x0xxx) and the unknown-instruction handler."""

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import EmulatorState, halt
from chipjax.decode import DecodedInstruction
from chipjax.constants import HALT_STACK_UNDERFLOW
from chipjax.stack import pop, is_empty
from chipjax.logging import report_unknown_instruction


def execute_unknown(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Unrecognized word: count it and report it, nothing else changes."""
    jax.debug.callback(report_unknown_instruction, instruction.raw, state.pc)
    return state.replace(unknown_count=state.unknown_count + 1)


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine. Returning with an empty stack halts the machine."""
    def _pop(state):
        stack, address = pop(state.stack)
        return state.replace(stack=stack, pc=address)

    return jax.lax.cond(
        is_empty(state.stack),
        lambda state: halt(state, HALT_STACK_UNDERFLOW),
        _pop,
        state
    )


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions."""
    return jax.lax.cond(
        0x00E0 == instruction.raw,
        execute_clear_screen,
        lambda state, instruction: jax.lax.cond(
            0x00EE == instruction.raw,
            execute_return,
            execute_unknown,
            state, instruction
        ),
        state, instruction
    )
