"""Console logging for chipvm.

``ConsoleLogger`` prints leveled lines with optional ANSI colors and time since
start. ``MachineLogger`` adds the events a running machine reports.
"""

import sys
import time
from typing import Any, Dict, Optional, TextIO

from chipvm.config import MachineConfig
from chipvm.errors import Chip8Error

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
RESET_COLOR = "\033[0m"


class ConsoleLogger:
    """Leveled logger writing one line per message to a text stream.

    Colors are only used when the stream is a terminal.
    """

    def __init__(
        self,
        name: str = "chipvm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream: Optional[TextIO] = None,
    ):
        level = log_level.upper()
        if level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")

        self.name = name
        self.log_level = level
        self.threshold = LEVELS.index(level)
        self.stream = stream if stream is not None else sys.stdout
        isatty = getattr(self.stream, "isatty", None)
        self.use_colors = use_colors and isatty is not None and isatty()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def log(self, level: str, message: str):
        if LEVELS.index(level) < self.threshold:
            return
        tag = f"[{level:>8s}]"
        if self.use_colors:
            tag = f"{LEVEL_COLORS[level]}{tag}{RESET_COLOR}"
        stamp = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        print(f"{stamp}{tag}[{self.name}] {message}", file=self.stream, flush=True)

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


class MachineLogger(ConsoleLogger):
    """Logger for a running machine."""

    def __init__(self, name: str = "chipvm", **kwargs):
        super().__init__(name, **kwargs)
        self.last_stats_time = time.time()

    def log_rom_loaded(self, size: int, source: Optional[str] = None):
        where = f" from {source}" if source else ""
        self.info(f"Loaded {size} byte ROM{where}")

    def log_config(self, config: MachineConfig):
        """Log rates, error policy and enabled quirks."""
        self.info(
            f"Instruction rate {config.instruction_rate} Hz, timer rate {config.timer_rate} Hz, "
            f"invalid opcodes: {config.invalid_opcode_policy}"
        )
        enabled = config.quirks.enabled()
        self.info(f"Quirks: {', '.join(enabled) if enabled else 'none (modern)'}")

    def log_machine_error(self, error: Chip8Error):
        """Recoverable errors are warnings, fatal ones errors."""
        if error.fatal:
            self.error(f"{error.kind}: {error}")
        else:
            self.warning(f"{error.kind}: {error}")

    def log_halt(self, error: Chip8Error):
        self.critical(f"Machine halted after {error.kind} at pc=0x{error.pc or 0:03X}")

    def log_run_stats(self, stats: Dict[str, Any], interval: float = 5.0, force: bool = False):
        """Log run statistics at most once per ``interval`` seconds."""
        current_time = time.time()
        if not force and current_time - self.last_stats_time < interval:
            return
        self.last_stats_time = current_time

        parts = []
        for key, value in stats.items():
            if isinstance(value, float):
                parts.append(f"{key}={value:.1f}")
            else:
                parts.append(f"{key}={value}")
        self.info(" | ".join(parts))
