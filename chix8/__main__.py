"""Run a CHIP-8 ROM headless and print the final display.

Example:
    python -m chix8 roms/ibm_logo.ch8 --frames 120
"""

import argparse
import sys

import numpy as np

from chix8.errors import Chip8Error
from chix8.interpreter import Interpreter, InterpreterConfig


def render_text(display: np.ndarray, on: str = "#", off: str = ".") -> str:
    """Render a (64, 32) display as text, one line per row."""
    return "\n".join(
        "".join(on if pixel else off for pixel in row) for row in display.T
    )


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="chix8", description="Run a CHIP-8 ROM headless and print the display."
    )
    parser.add_argument("rom", help="Path to the CHIP-8 ROM")
    parser.add_argument(
        "--frames", type=int, default=60, help="Number of 60 Hz frames to run"
    )
    parser.add_argument(
        "--cycles-per-frame",
        type=int,
        default=11,
        help="Instructions retired per frame",
    )
    parser.add_argument(
        "--seed", type=int, default=0, help="Seed for the random instruction"
    )
    parser.add_argument(
        "--key",
        type=lambda value: int(value, 16),
        default=None,
        help="Hex key (0-F) held down for the whole run",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "OFF"],
    )
    parser.add_argument(
        "--progress", action="store_true", help="Show a progress bar"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    config = InterpreterConfig(
        cycles_per_frame=args.cycles_per_frame,
        seed=args.seed,
        log_level=args.log_level,
        show_progress=args.progress,
    )

    try:
        interpreter = Interpreter(args.rom, config)
        if args.key is not None:
            interpreter.press_key(args.key)
        display = interpreter.run_frames(args.frames)
    except (Chip8Error, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(render_text(display))
    return 0


if __name__ == "__main__":
    sys.exit(main())
