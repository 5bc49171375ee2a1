"""Console logging utilities for chix8 hosts.

Provides a small level-filtered console logger and tqdm progress bars for
long headless runs. The traced interpreter core never logs; these helpers
are used by the host-facing ``Interpreter`` and the command line.
"""

import time
import sys
from typing import Any, Dict, Optional, TextIO

from tqdm import tqdm

# Ordered from most to least verbose; OFF silences the logger
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "OFF")

_HIGHLIGHT = {"WARNING": "\033[33m", "ERROR": "\033[31m"}
_RESET = "\033[0m"


class ConsoleLogger:
    """Level-filtered logger writing one line per message to stderr.

    Warnings and errors are highlighted when the stream is a terminal, so the
    display the command line prints on stdout stays clean.
    """

    def __init__(
        self,
        name: str = "chix8",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream: Optional[TextIO] = None,
    ):
        self.name = name
        self.log_level = log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(
                f"Unknown log level '{log_level}'. Available: {list(LOG_LEVELS)}"
            )
        self.stream = stream
        self.use_colors = use_colors and self._stream().isatty()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def _stream(self) -> TextIO:
        return self.stream or sys.stderr

    def enabled_for(self, level: str) -> bool:
        return LOG_LEVELS.index(level) >= LOG_LEVELS.index(self.log_level)

    def log(self, level: str, message: str):
        """Log ``message`` if ``level`` passes the filter."""
        if not self.enabled_for(level):
            return
        prefix = f"[{level}]"
        if self.use_colors and level in _HIGHLIGHT:
            prefix = f"{_HIGHLIGHT[level]}{prefix}{_RESET}"
        if self.show_timestamps:
            prefix = f"[{time.time() - self.start_time:8.2f}s]{prefix}"
        print(f"{prefix}[{self.name}] {message}", file=self._stream(), flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)


class InterpreterLogger(ConsoleLogger):
    """Logger for interpreter lifecycle events and run summaries."""

    def __init__(self, name: str = "chix8", **kwargs):
        super().__init__(name, **kwargs)
        self.run_history = []

    def log_config(self, config: Dict[str, Any]):
        """Log the interpreter configuration."""
        self.debug("Interpreter configuration:")
        for key, value in config.items():
            self.debug(f"  {key}: {value}")

    def log_rom_loaded(self, rom_path: str, size: int):
        self.info(f"Loaded ROM {rom_path} ({size} bytes)")

    def log_run(self, frames: int, cycles: int, elapsed: float):
        """Log a finished run and keep it in the history."""
        rate = cycles / elapsed if elapsed > 0 else 0.0
        self.info(
            f"Ran {frames} frames, {cycles} cycles in {elapsed:.2f}s "
            f"({rate:,.0f} cycles/s)"
        )
        self.run_history.append(
            {"frames": frames, "cycles": cycles, "time": elapsed}
        )

    def log_fault(self, pc: int, message: str):
        self.error(f"Machine fault near pc=0x{pc:03X}: {message}")


def build_progress_bar(
    n: int,
    desc: Optional[str] = None,
    enabled: bool = True,
    **kwargs,
) -> tqdm:
    """Build a tqdm progress bar counting frames of a headless run."""
    if desc is None:
        desc = f"Running ({n:,} frames)"

    for kwarg in ("total", "disable"):
        kwargs.pop(kwarg, None)

    return tqdm(total=n, desc=desc, unit="frame", disable=not enabled, **kwargs)
