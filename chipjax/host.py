"""Host side of the emulator: window, input, frame pacing and the command line.

The engine only knows ``step`` and ``tick_timers``; everything time- or device-related
lives here. One frame = poll input, ``run_frame`` (timer tick + N instructions), draw.
"""

import argparse
import os
import sys
from typing import Optional, Sequence

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import jax
import jax.numpy as jnp
import pygame
from flax.struct import dataclass
from tqdm import tqdm

from chipjax.constants import SCREEN_WIDTH, SCREEN_HEIGHT, HALT_NONE, HALT_HOST_REQUEST
from chipjax.emulator import load_rom, run_frame
from chipjax.keypad import KEY_BINDINGS, keypad_from_pressed
from chipjax.logging import (
    get_logger, set_log_level, format_registers, format_keypad, format_next_instruction, halt_reason_name,
)
from chipjax.rendering import display_to_rgb, create_color_scheme, display_to_text
from chipjax.state import EmulatorState, create_state, get_quirks, request_halt, reset_state

logger = get_logger()


@dataclass
class HostConfig:
    """Settings for a run.

    Attributes:
        instructions_per_frame: CHIP-8 instructions executed per 60 Hz frame
        fps: Frames per second, also the timer rate
        scale: Window pixels per CHIP-8 pixel
        color_scheme: Name understood by ``create_color_scheme``
        quirks: Name of a preset in ``QUIRK_PRESETS``
        seed: Seed for the CXNN random generator
        max_frames: Frame budget for headless runs
    """
    instructions_per_frame: int = 10
    fps: int = 60
    scale: int = 10
    color_scheme: str = "classic"
    quirks: str = "default"
    seed: int = 0
    max_frames: int = 600

    def validate(self):
        """Raise ValueError on settings that cannot run."""
        for name in ("instructions_per_frame", "fps", "scale", "max_frames"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1, got {getattr(self, name)}")
        create_color_scheme(self.color_scheme)
        get_quirks(self.quirks)


class PygameDisplay:
    """Window and keyboard owned by the host for the duration of a run.

    Use as a context manager; pygame is shut down on every exit path.
    """

    def __init__(self, scale: int, on_color, off_color, title: str = "chipjax"):
        self.scale = scale
        self.on_color = on_color
        self.off_color = off_color
        self.title = title
        self.screen = None
        self.clock = None
        self.key_codes = {char: getattr(pygame, f"K_{char}") for char in KEY_BINDINGS}

    def __enter__(self):
        pygame.init()
        self.screen = pygame.display.set_mode((SCREEN_WIDTH * self.scale, SCREEN_HEIGHT * self.scale))
        pygame.display.set_caption(self.title)
        self.clock = pygame.time.Clock()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        pygame.quit()
        self.screen = None
        return False

    def poll(self) -> tuple[bool, bool, jnp.ndarray]:
        """Drain window events.

        Returns:
            Tuple of (quit_requested, reset_requested, keypad)
        """
        quit_requested = False
        reset_requested = False
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                quit_requested = True
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    quit_requested = True
                elif event.key == pygame.K_BACKSPACE:
                    reset_requested = True

        pressed = pygame.key.get_pressed()
        held = [char for char, code in self.key_codes.items() if pressed[code]]
        return quit_requested, reset_requested, keypad_from_pressed(held)

    def draw(self, display: jnp.ndarray):
        frame = display_to_rgb(display, self.scale, self.on_color, self.off_color)
        # surfarray expects (width, height, 3)
        surface = pygame.surfarray.make_surface(frame.swapaxes(0, 1))
        self.screen.blit(surface, (0, 0))
        pygame.display.flip()

    def wait_frame(self, fps: int):
        self.clock.tick(fps)


def _boot(rom_path: str, config: HostConfig) -> Optional[EmulatorState]:
    """Build a state with the ROM loaded, or None if the settings or the ROM are unusable."""
    try:
        config.validate()
    except ValueError as e:
        logger.error(str(e))
        return None
    state = create_state(jax.random.PRNGKey(config.seed), get_quirks(config.quirks))
    state, ok = load_rom(state, rom_path)
    return state if ok else None


def _finish(state: EmulatorState) -> int:
    """Log how the run ended and map it to an exit code."""
    reason = int(state.halt_reason)
    logger.debug("Final registers:\n" + format_registers(state))
    logger.debug("Final keypad:\n" + format_keypad(state))
    logger.debug("Next instruction: " + format_next_instruction(state))
    if int(state.unknown_count):
        logger.warning(f"{int(state.unknown_count)} unknown instructions were executed")
    if bool(state.halted) and reason not in (HALT_NONE, HALT_HOST_REQUEST):
        logger.error(f"Halted at 0x{int(state.pc):03X}: {halt_reason_name(reason)}")
        return 1
    return 0


def run_emulator(rom_path: str, config: HostConfig = HostConfig()) -> int:
    """Run a ROM in a window until the user quits or the machine halts.

    Controls: the 1234/QWER/ASDF/ZXCV block is the keypad, Backspace resets,
    Escape quits.
    """
    state = _boot(rom_path, config)
    if state is None:
        return 1

    on_color, off_color = create_color_scheme(config.color_scheme)
    with PygameDisplay(config.scale, on_color, off_color) as screen:
        while True:
            quit_requested, reset_requested, keypad = screen.poll()
            if quit_requested:
                state = request_halt(state)
                break
            if reset_requested:
                state = reset_state(state)
                logger.info("Reset")

            state = run_frame(state.replace(keypad=keypad), config.instructions_per_frame)
            screen.draw(state.display)
            if bool(state.halted):
                break
            screen.wait_frame(config.fps)

    return _finish(state)


def run_headless(rom_path: str, config: HostConfig = HostConfig()) -> int:
    """Run a ROM without a window for ``config.max_frames`` frames and log the final screen."""
    state = _boot(rom_path, config)
    if state is None:
        return 1

    for _ in tqdm(range(config.max_frames), desc="Running", unit="frame", leave=False):
        state = run_frame(state, config.instructions_per_frame)
        if bool(state.halted):
            break

    logger.info("Final display:\n" + display_to_text(state.display))
    return _finish(state)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    defaults = HostConfig()
    parser = argparse.ArgumentParser(description="Run a CHIP-8 ROM")
    parser.add_argument("rom", type=str, help="Path to the ROM image")
    parser.add_argument(
        "--ipf",
        type=int,
        default=defaults.instructions_per_frame,
        help=f"Instructions per frame (default: {defaults.instructions_per_frame})",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=defaults.fps,
        help=f"Frames per second (default: {defaults.fps})",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=defaults.scale,
        help=f"Window pixels per CHIP-8 pixel (default: {defaults.scale})",
    )
    parser.add_argument(
        "--colors",
        type=str,
        default=defaults.color_scheme,
        help=f"Color scheme (default: {defaults.color_scheme})",
    )
    parser.add_argument(
        "--quirks",
        type=str,
        default=defaults.quirks,
        help=f"Quirk preset: default, cosmac or modern (default: {defaults.quirks})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=defaults.seed,
        help=f"Random seed (default: {defaults.seed})",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run without a window and print the final display",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=defaults.max_frames,
        help=f"Frames to run in headless mode (default: {defaults.max_frames})",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="DEBUG, INFO, WARNING, ERROR or CRITICAL (default: INFO)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    config = HostConfig(
        instructions_per_frame=args.ipf,
        fps=args.fps,
        scale=args.scale,
        color_scheme=args.colors,
        quirks=args.quirks,
        seed=args.seed,
        max_frames=args.frames,
    )
    try:
        set_log_level(args.log_level)
    except ValueError as e:
        logger.error(str(e))
        return 1

    if args.headless:
        return run_headless(args.rom, config)
    return run_emulator(args.rom, config)


if __name__ == "__main__":
    sys.exit(main())
