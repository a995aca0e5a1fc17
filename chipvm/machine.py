"""Stateful CHIP-8 machine driven once per host frame."""

from typing import NamedTuple, Optional, Sequence

import jax.numpy as jnp
import numpy as np

from chipvm.config import MachineConfig
from chipvm.constants import ADDRESS_MASK, NUM_KEYS
from chipvm.emulator import load_rom, step, tick_timers
from chipvm.errors import Chip8Error, DecodeError
from chipvm.logging import MachineLogger
from chipvm.rng import KeyRandomSource, RandomSource
from chipvm.state import EmulatorState, create_state
from chipvm.timing import Event, TimingDriver


class Framebuffer(NamedTuple):
    """Read-only display snapshot.

    Attributes:
        pixels: Boolean array of shape (64, 32), indexed [x, y]
        dirty: Whether the display changed since the previous read
    """
    pixels: np.ndarray
    dirty: bool


class Chip8:
    """CHIP-8 virtual machine.

    The host calls :meth:`set_keys` and :meth:`advance` once per frame, then reads
    :meth:`framebuffer` and :meth:`beeping`. Errors raised by instructions are
    recorded in :meth:`last_error`; fatal ones (and undefined opcodes under the
    ``halt`` policy) leave the machine halted until :meth:`load` or :meth:`reset`.
    """

    def __init__(
        self,
        config: Optional[MachineConfig] = None,
        random_source: Optional[RandomSource] = None,
        logger: Optional[MachineLogger] = None,
    ):
        self._config = config if config is not None else MachineConfig()
        self.random_source = random_source if random_source is not None else KeyRandomSource()
        self.logger = logger if logger is not None else MachineLogger(log_level="WARNING")

        self._rom = b""
        self._state = self._fresh_state()
        self._driver = TimingDriver(self._config.instruction_rate, self._config.timer_rate)
        self._halted = False
        self._last_error: Optional[Chip8Error] = None
        self.instruction_count = 0
        self.tick_count = 0

    def _fresh_state(self) -> EmulatorState:
        return create_state(quirks=self._config.quirks, random_source=self.random_source)

    @property
    def state(self) -> EmulatorState:
        return self._state

    @property
    def config(self) -> MachineConfig:
        return self._config

    @property
    def halted(self) -> bool:
        return self._halted

    @property
    def waiting_for_key(self) -> bool:
        return self._state.awaiting_key

    def load(self, rom_bytes: bytes):
        """Reset the machine and copy the ROM image to 0x200.

        Raises ``LoadError`` for oversized images, leaving the machine untouched.
        """
        rom = bytes(rom_bytes)
        state = load_rom(self._fresh_state(), rom)

        self._rom = rom
        self._state = state
        self._driver = TimingDriver(self._config.instruction_rate, self._config.timer_rate)
        self._halted = False
        self._last_error = None
        self.instruction_count = 0
        self.tick_count = 0
        self.logger.log_rom_loaded(len(rom))

    def reset(self):
        """Reload the current ROM into a fresh machine."""
        self.load(self._rom)

    def configure(self, config: MachineConfig):
        """Switch rates, quirks and error policy without resetting the machine."""
        if config == self._config:
            return
        self._config = config
        self._state = self._state.replace(quirks=config.quirks)
        self._driver.set_rates(config.instruction_rate, config.timer_rate)
        self.logger.log_config(config)

    def set_keys(self, keys: Sequence[bool]):
        """Set the pressed state of the 16 keys."""
        keypad = jnp.asarray(np.asarray(keys, dtype=np.bool_))
        if keypad.shape != (NUM_KEYS,):
            raise ValueError(f"Expected {NUM_KEYS} key states, got shape {keypad.shape}")
        self._state = self._state.replace(previous_keypad=self._state.keypad, keypad=keypad)

    def advance(self, elapsed_seconds: float, config: Optional[MachineConfig] = None):
        """Run the instructions and timer ticks due within ``elapsed_seconds``."""
        if config is not None:
            self.configure(config)
        self._last_error = None
        if self._halted:
            return

        for event in self._driver.advance(elapsed_seconds):
            if event is Event.TIMER:
                self._state = tick_timers(self._state)
                self.tick_count += 1
            elif self._state.vblank_wait:
                continue
            elif not self._run_instruction():
                break

    def step(self) -> bool:
        """Execute a single instruction. Returns ``False`` once the machine is halted."""
        self._last_error = None
        if self._halted:
            return False
        return self._run_instruction()

    def _run_instruction(self) -> bool:
        pc = int(self._state.pc)
        try:
            self._state = step(self._state)
        except Chip8Error as error:
            self._last_error = error
            self.logger.log_machine_error(error)
            if error.fatal or self._config.halts_on_invalid_opcode:
                self._halted = True
                self.logger.log_halt(error)
                return False
            if isinstance(error, DecodeError):
                self._state = self._state.replace(pc=jnp.asarray((pc + 2) & ADDRESS_MASK, dtype=jnp.uint16))
        self.instruction_count += 1
        return True

    def framebuffer(self) -> Framebuffer:
        """Snapshot the display and clear the dirty flag."""
        pixels = np.array(self._state.display, dtype=np.bool_)
        pixels.flags.writeable = False
        dirty = self._state.display_dirty
        self._state = self._state.replace(display_dirty=False)
        return Framebuffer(pixels=pixels, dirty=dirty)

    def beeping(self) -> bool:
        return int(self._state.sound_timer) > 0

    def last_error(self) -> Optional[Chip8Error]:
        return self._last_error
