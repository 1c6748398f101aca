"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chipjax import create_state, get_quirks, load_rom_bytes, PROGRAM_START


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def modern_state():
    """Provide a fresh state with the modern quirk preset."""
    return create_state(quirks=get_quirks("modern"))


@pytest.fixture
def cosmac_state():
    """Provide a fresh state with the COSMAC VIP quirk preset."""
    return create_state(quirks=get_quirks("cosmac"))


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def set_registers(state, **values):
    """Helper to set registers by name, e.g. ``set_registers(state, V1=0x10, VF=1)``."""
    V = state.V
    for name, value in values.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


def load_program(state, program):
    """Helper to load a list of byte values at 0x200."""
    state = load_rom_bytes(state, bytes(program))
    assert int(state.pc) == PROGRAM_START
    return state
