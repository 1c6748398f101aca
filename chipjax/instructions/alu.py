"""CHIP-8 ALU operations (8xxx).

Each operation maps ``(vx, vy, vf)`` to ``(result, new_vf, writes_vf)``. The result is
stored in VX first and the flag second, so when X is F the flag wins, except for
operations that leave VF alone.
"""

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.instructions.system import execute_unknown

_TRUE = jnp.ones((), dtype=jnp.bool_)
_FALSE = jnp.zeros((), dtype=jnp.bool_)


def _u8(value):
    return jnp.asarray(value & 0xFF, dtype=jnp.uint8)


def alu_set(vx, vy, vf):
    """8XY0 - Set: VX = VY."""
    return vy, vf, _FALSE


def alu_or(vx, vy, vf):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, _u8(0), _TRUE


def alu_and(vx, vy, vf):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, _u8(0), _TRUE


def alu_xor(vx, vy, vf):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, _u8(0), _TRUE


def alu_add(vx, vy, vf):
    """8XY4 - Add: VX += VY, VF = carry."""
    result = jnp.asarray(vx, dtype=jnp.uint16) + jnp.asarray(vy, dtype=jnp.uint16)
    carry = _u8(jnp.asarray(result > 255, dtype=jnp.uint8))
    return _u8(result), carry, _TRUE


def alu_sub_xy(vx, vy, vf):
    """8XY5 - Subtract: VX -= VY, VF = 1 when VX > VY beforehand."""
    not_borrow = _u8(jnp.asarray(vx > vy, dtype=jnp.uint8))
    return vx - vy, not_borrow, _TRUE


def alu_shift_right(vx, vy, vf):
    """8XY6 - Shift right, VF = bit shifted out."""
    return vx >> 1, vx & 1, _TRUE


def alu_sub_yx(vx, vy, vf):
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when VY > VX beforehand."""
    not_borrow = _u8(jnp.asarray(vy > vx, dtype=jnp.uint8))
    return vy - vx, not_borrow, _TRUE


def alu_shift_left(vx, vy, vf):
    """8XYE - Shift left, VF = bit shifted out."""
    shifted = jnp.asarray(vx, dtype=jnp.uint16) << 1
    return _u8(shifted), (vx >> 7) & 1, _TRUE


# ALU selector (low nibble) -> position in the dispatch table below
_ALU_SLOTS = jnp.array([0, 1, 2, 3, 4, 5, 6, 7, -1, -1, -1, -1, -1, -1, 8, -1], dtype=jnp.int32)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    quirks = state.quirks

    def _shift_right(vx, vy, vf):
        return alu_shift_right(vy if quirks.shift_source_vy else vx, vy, vf)

    def _shift_left(vx, vy, vf):
        return alu_shift_left(vy if quirks.shift_source_vy else vx, vy, vf)

    def _logic(op):
        if quirks.logic_resets_vf:
            return op

        def _keep_vf(vx, vy, vf):
            result, _, _ = op(vx, vy, vf)
            return result, vf, _FALSE
        return _keep_vf

    def _apply(state, instruction):
        vx = state.V[instruction.x]
        vy = state.V[instruction.y]
        vf = state.V[15]

        result, new_vf, writes_vf = jax.lax.switch(
            _ALU_SLOTS[instruction.n],
            [alu_set, _logic(alu_or), _logic(alu_and), _logic(alu_xor), alu_add,
             alu_sub_xy, _shift_right, alu_sub_yx, _shift_left],
            vx, vy, vf
        )

        new_V = state.V.at[instruction.x].set(result)
        new_V = new_V.at[15].set(jnp.where(writes_vf, new_vf, new_V[15]))
        return state.replace(V=new_V)

    return jax.lax.cond(
        _ALU_SLOTS[instruction.n] >= 0,
        _apply,
        execute_unknown,
        state, instruction
    )
