"""CHIP-8 emulator package."""

from chipjax.state import (
    EmulatorState, Quirks, QUIRK_PRESETS, create_state, get_quirks, reset_state, request_halt,
)
from chipjax.emulator import execute, fetch, step, run_frame, load_rom, load_rom_bytes
from chipjax.timers import tick_timers, sound_active
from chipjax.decode import DecodedInstruction, decode, mnemonic
from chipjax.constants import *
from chipjax.rendering import display_to_rgb, create_color_scheme, display_to_text

__all__ = [
    "EmulatorState",
    "Quirks",
    "QUIRK_PRESETS",
    "create_state",
    "get_quirks",
    "reset_state",
    "request_halt",
    "fetch",
    "execute",
    "step",
    "run_frame",
    "tick_timers",
    "sound_active",
    "load_rom",
    "load_rom_bytes",
    "DecodedInstruction",
    "decode",
    "mnemonic",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "STACK_SIZE",
    "HALT_NONE",
    "HALT_STACK_OVERFLOW",
    "HALT_STACK_UNDERFLOW",
    "HALT_PC_OUT_OF_BOUNDS",
    "HALT_HOST_REQUEST",
    "display_to_rgb",
    "create_color_scheme",
    "display_to_text",
]
