"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.constants import SCREEN_WIDTH, SCREEN_HEIGHT, MEMORY_SIZE

# Pre-computed coordinate grids, laid out like the display: (row, column)
yy, xx = jnp.meshgrid(jnp.arange(SCREEN_HEIGHT), jnp.arange(SCREEN_WIDTH), indexing='ij')


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    The start position wraps, the sprite itself is clipped at the right and bottom
    edges. VF is 1 if any lit pixel was switched off.
    """
    sprite_x = state.V[instruction.x].astype(jnp.int32) % SCREEN_WIDTH
    sprite_y = state.V[instruction.y].astype(jnp.int32) % SCREEN_HEIGHT

    in_sprite = (xx >= sprite_x) & (xx < sprite_x + 8) & (yy >= sprite_y) & (yy < sprite_y + instruction.n)

    row_offset = jnp.clip(yy - sprite_y, 0, 15)
    bit_offset = jnp.clip(xx - sprite_x, 0, 7)
    sprite_bytes = state.memory[(state.I.astype(jnp.int32) + row_offset) % MEMORY_SIZE]
    sprite = (((sprite_bytes >> (7 - bit_offset)) & 1) == 1) & in_sprite

    collision = jnp.any(state.display & sprite)
    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[15].set(collision.astype(jnp.uint8))
    )
