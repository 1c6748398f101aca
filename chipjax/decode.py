"""CHIP-8 instruction decoding.

An instruction word is split into the operand fields every handler works from:

    opcode  x     y     n
    [15:12] [11:8] [7:4] [3:0]
                  nn = [7:0], nnn = [11:0]
"""

from typing import Optional

from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Instruction word with its operand fields extracted."""
    raw: int
    opcode: int  # family selector
    x: int       # VX register index
    y: int       # VY register index
    n: int       # 4-bit immediate / ALU selector
    nn: int      # 8-bit immediate / sub-selector for E and F families
    nnn: int     # 12-bit address


def decode(instruction: int) -> DecodedInstruction:
    """Split a 16-bit word into operand fields. Works on ints and traced arrays."""
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction >> 12) & 0xF,
        x=(instruction >> 8) & 0xF,
        y=(instruction >> 4) & 0xF,
        n=instruction & 0xF,
        nn=instruction & 0xFF,
        nnn=instruction & 0xFFF,
    )


# Families whose operation is fully selected by the top nibble
_FAMILY_NAMES = {
    0x1: "jump", 0x2: "call", 0x3: "skip-eq-imm", 0x4: "skip-ne-imm",
    0x6: "load-imm", 0x7: "add-imm", 0xA: "load-index", 0xB: "jump-offset",
    0xC: "random", 0xD: "draw",
}

_SYSTEM_NAMES = {0x00E0: "clear", 0x00EE: "return"}

_ALU_NAMES = {
    0x0: "copy", 0x1: "or", 0x2: "and", 0x3: "xor", 0x4: "add-reg",
    0x5: "sub", 0x6: "shr", 0x7: "subn", 0xE: "shl",
}

_KEY_NAMES = {0x9E: "skip-key-down", 0xA1: "skip-key-up"}

_MISC_NAMES = {
    0x07: "read-delay", 0x0A: "wait-key", 0x15: "set-delay", 0x18: "set-sound",
    0x1E: "add-index", 0x29: "font-addr", 0x33: "bcd", 0x55: "store-regs",
    0x65: "load-regs",
}


def mnemonic(instruction: int) -> Optional[str]:
    """Name of the operation a word encodes, or None if it is not a CHIP-8 instruction."""
    decoded = decode(int(instruction) & 0xFFFF)
    if decoded.opcode in _FAMILY_NAMES:
        return _FAMILY_NAMES[decoded.opcode]
    if decoded.opcode == 0x0:
        return _SYSTEM_NAMES.get(decoded.raw)
    if decoded.opcode in (0x5, 0x9):
        if decoded.n != 0:
            return None
        return "skip-eq-reg" if decoded.opcode == 0x5 else "skip-ne-reg"
    if decoded.opcode == 0x8:
        return _ALU_NAMES.get(decoded.n)
    if decoded.opcode == 0xE:
        return _KEY_NAMES.get(decoded.nn)
    return _MISC_NAMES.get(decoded.nn)


def format_instruction(instruction: int) -> str:
    """Render an instruction word as four hex digits, e.g. ``0x00E0``."""
    return f"0x{int(instruction) & 0xFFFF:04X}"
