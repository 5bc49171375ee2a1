"""Host-facing CHIP-8 interpreter.

Wraps the functional core with the pieces a host needs: ROM loading, a key
latch, 60 Hz timer ticks and display snapshots.
"""

import dataclasses
import time
from typing import Optional

import jax
import numpy as np
from flax.struct import dataclass, field

from chix8.state import EmulatorState, create_state, press_key, release_key
from chix8.emulator import run_cycles, run_until_frame, tick_timers, snapshot_display, load_rom_bytes
from chix8.constants import MAX_ROM_SIZE
from chix8.errors import MachineFault, RomTooLargeError
from chix8.logging import InterpreterLogger, build_progress_bar


@dataclass(frozen=True)
class InterpreterConfig:
    """Host-side interpreter settings.

    Attributes:
        cycles_per_frame: Instructions retired per 60 Hz frame (11 is ~700 Hz)
        max_cycles_per_frame: Budget for ``wait_for_frame`` before giving up
        seed: Seed for the PRNG key used by CXKK
        log_level: Console log level
        show_progress: Show a progress bar in ``run_frames``
    """
    cycles_per_frame: int = field(pytree_node=False, default=11)
    max_cycles_per_frame: int = field(pytree_node=False, default=10_000)
    seed: int = field(pytree_node=False, default=0)
    log_level: str = field(pytree_node=False, default="INFO")
    show_progress: bool = field(pytree_node=False, default=False)

    def __post_init__(self):
        if self.cycles_per_frame <= 0:
            raise ValueError(f"cycles_per_frame must be positive, got {self.cycles_per_frame}")
        if self.max_cycles_per_frame <= 0:
            raise ValueError(f"max_cycles_per_frame must be positive, got {self.max_cycles_per_frame}")


class Interpreter:
    """CHIP-8 interpreter driven by a host loop.

    The host calls ``step_frame`` once per 60 Hz tick (or ``wait_for_frame``
    to run until the program draws), feeds key changes through
    ``press_key``/``release_key`` between frames and reads ``display``.
    """

    def __init__(
        self,
        rom_path: str,
        config: Optional[InterpreterConfig] = None,
        logger: Optional[InterpreterLogger] = None,
    ):
        """Initialize the interpreter.

        Args:
            rom_path: Path to the CHIP-8 ROM file to load
            config: Interpreter settings, defaults to ``InterpreterConfig()``
            logger: Logger to report to, built from ``config.log_level`` if None

        Raises:
            RomTooLargeError: If the ROM does not fit in memory
        """
        self.rom_path = rom_path
        self.config = config or InterpreterConfig()
        self.logger = logger or InterpreterLogger(log_level=self.config.log_level)

        with open(rom_path, 'rb') as f:
            self.rom_data = f.read()

        if len(self.rom_data) > MAX_ROM_SIZE:
            error = RomTooLargeError(len(self.rom_data), MAX_ROM_SIZE)
            self.logger.error(str(error))
            raise error

        self.logger.log_config(dataclasses.asdict(self.config))
        self.logger.log_rom_loaded(rom_path, len(self.rom_data))
        self.state: EmulatorState = self._initial_state()
        self.frame_count = 0
        self.cycle_count = 0

    def _initial_state(self) -> EmulatorState:
        state = create_state(jax.random.PRNGKey(self.config.seed))
        return load_rom_bytes(state, self.rom_data)

    def reset(self) -> np.ndarray:
        """Restart the program from a fresh machine state."""
        self.state = self._initial_state()
        self.frame_count = 0
        self.cycle_count = 0
        self.logger.debug("Interpreter reset")
        return self.display

    def _guard(self, step_fn, *args):
        try:
            return step_fn(self.state, *args)
        except MachineFault as fault:
            self.logger.log_fault(int(self.state.pc), str(fault))
            raise

    def step_frame(self) -> np.ndarray:
        """Run one 60 Hz frame: ``cycles_per_frame`` cycles, then a timer tick."""
        self.state = self._guard(run_cycles, self.config.cycles_per_frame)
        self.state = tick_timers(self.state)
        self.frame_count += 1
        self.cycle_count += self.config.cycles_per_frame
        return self.display

    def wait_for_frame(self) -> Optional[np.ndarray]:
        """Run until the program clears or draws to the display.

        Returns the display snapshot, or None if ``max_cycles_per_frame``
        cycles retired without a new frame.
        """
        self.state, cycles = self._guard(run_until_frame, self.config.max_cycles_per_frame)
        self.cycle_count += cycles
        if not bool(self.state.frame_ready):
            self.logger.warning(f"No frame after {cycles} cycles")
            return None
        return self.display

    def run_frames(self, n: int) -> np.ndarray:
        """Run ``n`` frames headless and return the final display."""
        start_time = time.time()
        start_cycles = self.cycle_count
        with build_progress_bar(n, enabled=self.config.show_progress) as progress:
            for _ in range(n):
                self.step_frame()
                progress.update(1)
        self.logger.log_run(n, self.cycle_count - start_cycles, time.time() - start_time)
        return self.display

    def press_key(self, key: int):
        """Latch ``key`` (0-15), replacing any latched key."""
        self.state = press_key(self.state, key)

    def release_key(self):
        self.state = release_key(self.state)

    def tick_timers(self):
        """Decrement the timers once, for hosts that drive them separately."""
        self.state = tick_timers(self.state)

    @property
    def display(self) -> np.ndarray:
        """Host-owned (64, 32) boolean snapshot of the display."""
        return snapshot_display(self.state)

    @property
    def sound_active(self) -> bool:
        """Whether the host should be playing its tone."""
        return bool(self.state.sound_timer > 0)
