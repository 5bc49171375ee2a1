"""CHIP-8 interpreter package."""

from chix8.state import EmulatorState, StackState, Key, create_state, press_key, release_key
from chix8.emulator import (
    execute, fetch, cycle, run_cycles, run_until_frame, tick_timers,
    snapshot_display, load_rom, load_rom_bytes,
)
from chix8.decode import DecodedInstruction, Operation, decode, decode_operation
from chix8.errors import Chip8Error, MachineFault, RomTooLargeError
from chix8.interpreter import Interpreter, InterpreterConfig
from chix8.constants import *

__all__ = [
    "EmulatorState",
    "StackState",
    "Key",
    "create_state",
    "press_key",
    "release_key",
    "fetch",
    "execute",
    "cycle",
    "run_cycles",
    "run_until_frame",
    "tick_timers",
    "snapshot_display",
    "load_rom",
    "load_rom_bytes",
    "DecodedInstruction",
    "Operation",
    "decode",
    "decode_operation",
    "Chip8Error",
    "MachineFault",
    "RomTooLargeError",
    "Interpreter",
    "InterpreterConfig",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
