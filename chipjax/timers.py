"""CHIP-8 delay and sound timers.

Both counters tick down at 60 Hz independently of the instruction rate. The host
decides when a tick happens; nothing here knows about wall-clock time.
"""

import jax
import jax.numpy as jnp
from chipjax.state import EmulatorState


def _count_down(timer: jnp.ndarray) -> jnp.ndarray:
    return jnp.where(timer > 0, timer - 1, timer)


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement each nonzero timer by one. A halted machine is left untouched."""
    return jax.lax.cond(
        state.halted,
        lambda state: state,
        lambda state: state.replace(
            delay_timer=_count_down(state.delay_timer),
            sound_timer=_count_down(state.sound_timer),
        ),
        state
    )


def sound_active(state: EmulatorState) -> jnp.ndarray:
    """Whether the buzzer should sound."""
    return state.sound_timer > 0
