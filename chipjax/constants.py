"""CHIP-8 machine constants."""

import jax.numpy as jnp

MEMORY_SIZE = 4096
PROGRAM_START = 0x200
MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START
MAX_PC = MEMORY_SIZE - 2

ADDRESS_MASK = 0xFFF

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32

NUM_REGISTERS = 16
NUM_KEYS = 16
STACK_SIZE = 16

FONT_START = 0x050
FONT_GLYPH_SIZE = 5
FONT_DATA = jnp.array([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
], dtype=jnp.uint8)

# Reasons recorded in EmulatorState.halt_reason
HALT_NONE = 0
HALT_STACK_OVERFLOW = 1
HALT_STACK_UNDERFLOW = 2
HALT_PC_OUT_OF_BOUNDS = 3
HALT_HOST_REQUEST = 4

HALT_REASON_NAMES = {
    HALT_NONE: "none",
    HALT_STACK_OVERFLOW: "stack overflow",
    HALT_STACK_UNDERFLOW: "stack underflow",
    HALT_PC_OUT_OF_BOUNDS: "program counter out of bounds",
    HALT_HOST_REQUEST: "host request",
}
