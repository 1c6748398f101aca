"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chipjax.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, SCREEN_WIDTH, SCREEN_HEIGHT, STACK_SIZE,
    MEMORY_SIZE, NUM_REGISTERS, NUM_KEYS, HALT_NONE, HALT_HOST_REQUEST,
)


@dataclass
class Quirks:
    """Compatibility switches for instructions whose behavior differs between interpreters.

    Attributes:
        shift_source_vy: 8XY6/8XYE copy VY into VX before shifting. When False, VX is
            shifted in place and VY is ignored.
        jump_offset_vx: BXNN jumps to XNN + VX. When False, BNNN jumps to NNN + V0.
        load_store_increment: How FX55/FX65 move I afterwards: "one" (I += 1),
            "x_plus_one" (I += X + 1) or "none".
        logic_resets_vf: 8XY1/8XY2/8XY3 clear VF.
    """
    shift_source_vy: bool = True
    jump_offset_vx: bool = False
    load_store_increment: str = "one"
    logic_resets_vf: bool = True


QUIRK_PRESETS = {
    "default": Quirks(),
    "cosmac": Quirks(load_store_increment="x_plus_one"),
    "modern": Quirks(
        shift_source_vy=False,
        jump_offset_vx=True,
        load_store_increment="none",
        logic_resets_vf=False,
    ),
}


def get_quirks(name: str) -> Quirks:
    """Look up a quirk preset by name."""
    if name not in QUIRK_PRESETS:
        raise ValueError(
            f"Unknown quirk preset '{name}'. Available: {list(QUIRK_PRESETS.keys())}"
        )
    return QUIRK_PRESETS[name]


@dataclass
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    The display is stored row-major as (SCREEN_HEIGHT, SCREEN_WIDTH), so a pixel is
    ``display[y, x]`` and its flat index is ``x + y * SCREEN_WIDTH``.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = field(
        default_factory=lambda: jnp.zeros((SCREEN_HEIGHT, SCREEN_WIDTH), dtype=jnp.bool_)
    )
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    halted: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    halt_reason: jnp.ndarray = field(default_factory=lambda: jnp.asarray(HALT_NONE, dtype=jnp.uint8))
    unknown_count: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint32))
    rom_size: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    quirks: Quirks = field(pytree_node=False, default=Quirks())


def create_state(
    rng: jax.random.PRNGKey = jax.random.PRNGKey(0),
    quirks: Quirks = Quirks(),
) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState(rng, quirks=quirks)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))


def reset_state(state: EmulatorState) -> EmulatorState:
    """Warm reset: clear the CPU, display and timers but keep memory as it is."""
    fresh = create_state(state.rng, state.quirks)
    return fresh.replace(memory=state.memory, rom_size=state.rom_size)


def halt(state: EmulatorState, reason: int) -> EmulatorState:
    """Stop the machine, keeping the first recorded reason."""
    new_reason = jnp.where(state.halted, state.halt_reason, reason)
    return state.replace(
        halted=jnp.ones((), dtype=jnp.bool_),
        halt_reason=jnp.asarray(new_reason, dtype=jnp.uint8),
    )


def request_halt(state: EmulatorState) -> EmulatorState:
    """Host-initiated termination."""
    return halt(state, HALT_HOST_REQUEST)
