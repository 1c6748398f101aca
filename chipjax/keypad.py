"""CHIP-8 keypad layout and host key bindings."""

from typing import Iterable

import jax.numpy as jnp

from chipjax.constants import NUM_KEYS

# Hex key at each position of the COSMAC VIP 4x4 keypad
KEYPAD_LAYOUT = (
    (0x1, 0x2, 0x3, 0xC),
    (0x4, 0x5, 0x6, 0xD),
    (0x7, 0x8, 0x9, 0xE),
    (0xA, 0x0, 0xB, 0xF),
)

# Left-hand block of a QWERTY keyboard, same geometry as KEYPAD_LAYOUT
PHYSICAL_LAYOUT = ("1234", "qwer", "asdf", "zxcv")

KEY_BINDINGS = {
    char: key
    for chars, keys in zip(PHYSICAL_LAYOUT, KEYPAD_LAYOUT)
    for char, key in zip(chars, keys)
}


def keypad_from_pressed(pressed: Iterable[str]) -> jnp.ndarray:
    """Build the 16-cell keypad array from the characters of the physical keys held down.

    Characters without a binding are ignored.
    """
    keypad = [False] * NUM_KEYS
    for char in pressed:
        key = KEY_BINDINGS.get(char.lower())
        if key is not None:
            keypad[key] = True
    return jnp.array(keypad, dtype=jnp.bool_)
