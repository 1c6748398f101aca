"""Console logging utilities for the chipjax emulator.

The engine itself never prints: diagnostics raised from traced code go through
``jax.debug.callback`` into ``report_unknown_instruction``, which forwards them to
the package logger. Hosts use the same logger for load results, halts and state dumps.
"""

import time
import sys

from chipjax.constants import HALT_REASON_NAMES, MAX_PC
from chipjax.decode import format_instruction, mnemonic
from chipjax.keypad import KEYPAD_LAYOUT


class ConsoleLogger:
    """Flexible console logger with level filtering and optional colors."""

    def __init__(
        self,
        name: str = "chipjax",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.use_colors = (
            use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }

    def set_level(self, log_level: str):
        """Change the minimum level that gets printed."""
        level = log_level.upper()
        if level not in self.level_order:
            raise ValueError(
                f"Unknown log level '{log_level}'. Available: {list(self.level_order.keys())}"
            )
        self.log_level = level

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


_logger = ConsoleLogger()


def get_logger() -> ConsoleLogger:
    """Package-wide logger shared by the engine callbacks and the hosts."""
    return _logger


def set_log_level(log_level: str):
    _logger.set_level(log_level)


def report_unknown_instruction(instruction, pc):
    """Host-side target of the engine's unknown-instruction callback.

    ``pc`` is the already advanced program counter, so the word was fetched from ``pc - 2``.
    """
    address = (int(pc) - 2) & 0xFFFF
    _logger.warning(f"Unknown instruction {format_instruction(instruction)} at 0x{address:03X}")


def halt_reason_name(reason) -> str:
    return HALT_REASON_NAMES.get(int(reason), f"unknown ({int(reason)})")


def format_registers(state) -> str:
    """Multi-line dump of the register file, pointers and timers."""
    lines = []
    for row in range(0, 16, 4):
        lines.append("  ".join(f"V{r:X}={int(state.V[r]):02X}" for r in range(row, row + 4)))
    lines.append(
        f"I={int(state.I):03X}  PC={int(state.pc):03X}  SP={int(state.stack.pointer)}  "
        f"DT={int(state.delay_timer)}  ST={int(state.sound_timer)}"
    )
    return "\n".join(lines)


def format_next_instruction(state) -> str:
    """The word at PC with its operation name, e.g. ``0x1200 (jump)``."""
    pc = int(state.pc)
    if pc > MAX_PC:
        return f"none, PC 0x{pc:03X} is past the last instruction slot"
    word = (int(state.memory[pc]) << 8) | int(state.memory[pc + 1])
    return f"{format_instruction(word)} ({mnemonic(word) or 'unknown'})"


def format_keypad(state) -> str:
    """4x4 keypad grid; pressed keys show their hex digit, released keys a dot."""
    return "\n".join(
        " ".join(f"{key:X}" if bool(state.keypad[key]) else "." for key in row)
        for row in KEYPAD_LAYOUT
    )
