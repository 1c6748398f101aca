"""Main CHIP-8 emulator execution engine."""

from functools import partial

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import EmulatorState, halt
from chipjax.decode import decode
from chipjax.constants import PROGRAM_START, MAX_ROM_SIZE, MAX_PC, HALT_PC_OUT_OF_BOUNDS
from chipjax.logging import get_logger
from chipjax.timers import tick_timers
from chipjax.instructions.system import execute_system_instruction
from chipjax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chipjax.instructions.alu import execute_alu_operation
from chipjax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipjax.instructions.display import execute_display
from chipjax.instructions.misc import execute_misc_instruction

logger = get_logger()


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    ``state.pc`` is expected to already point past the instruction, as left by ``fetch``.
    """
    decoded_instruction = decode(instruction)

    return jax.lax.switch(
        decoded_instruction.opcode,
        [
            execute_system_instruction,
            execute_jump,
            execute_call,
            execute_skip_if_equal_immediate,
            execute_skip_if_not_equal_immediate,
            execute_skip_if_equal_register,
            execute_set,
            execute_add,
            execute_alu_operation,
            execute_skip_if_not_equal_register,
            execute_set_index,
            execute_jump_with_offset,
            execute_random,
            execute_display,
            execute_skip_if_key,
            execute_misc_instruction,
        ],
        state, decoded_instruction
    )


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory and advance the program counter."""
    instruction = _pack_u16(state.memory[state.pc], state.memory[state.pc + 1])
    return state.replace(pc=state.pc + 2), instruction


def _cycle(state: EmulatorState) -> EmulatorState:
    state, instruction = fetch(state)
    return execute(state, instruction)


def step(state: EmulatorState) -> EmulatorState:
    """Run one fetch-decode-execute cycle.

    A halted machine is returned unchanged. A program counter that would read past
    the end of memory halts the machine instead of fetching.
    """
    def _guarded_cycle(state):
        return jax.lax.cond(
            state.pc <= MAX_PC,
            _cycle,
            lambda state: halt(state, HALT_PC_OUT_OF_BOUNDS),
            state
        )

    return jax.lax.cond(state.halted, lambda state: state, _guarded_cycle, state)


@partial(jax.jit, static_argnums=1)
def run_frame(state: EmulatorState, instructions_per_frame: int) -> EmulatorState:
    """One 60 Hz frame: a timer tick followed by ``instructions_per_frame`` steps."""
    state = tick_timers(state)
    state, _ = jax.lax.scan(lambda state, _: (step(state), None), state, length=instructions_per_frame)
    return state


def load_rom_bytes(state: EmulatorState, rom_data: bytes) -> EmulatorState:
    """Copy a raw ROM image into memory at 0x200, truncating what does not fit."""
    if len(rom_data) > MAX_ROM_SIZE:
        logger.warning(
            f"ROM is {len(rom_data)} bytes, only the first {MAX_ROM_SIZE} fit in memory"
        )
        rom_data = rom_data[:MAX_ROM_SIZE]
    if not rom_data:
        return state.replace(rom_size=jnp.zeros((), dtype=jnp.uint16))

    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory, rom_size=jnp.asarray(len(rom_data), dtype=jnp.uint16))


def load_rom(state: EmulatorState, filename: str) -> tuple[EmulatorState, bool]:
    """Load ROM file into CHIP-8 memory starting at 0x200.

    Returns:
        Tuple of (state, ok). On failure the state is returned unchanged and the
        reason is logged; no exception escapes.
    """
    try:
        with open(filename, 'rb') as f:
            rom_data = f.read()
    except OSError as e:
        logger.error(f"Could not read ROM '{filename}': {e}")
        return state, False

    if not rom_data:
        logger.error(f"ROM '{filename}' is empty")
        return state, False

    state = load_rom_bytes(state, rom_data)
    logger.info(f"Loaded {int(state.rom_size)} bytes from '{filename}'")
    return state, True
