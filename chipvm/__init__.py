"""CHIP-8 emulator package."""

from chipvm.state import EmulatorState, StackState, create_state
from chipvm.emulator import execute, fetch, step, tick_timers, load_rom
from chipvm.decode import DecodedInstruction, decode
from chipvm.config import MachineConfig, Quirks, QUIRK_PRESETS
from chipvm.constants import *
from chipvm.errors import (
    Chip8Error, ConfigError, DecodeError, LoadError, StackOverflow, StackUnderflow,
)
from chipvm.machine import Chip8, Framebuffer
from chipvm.rng import KeyRandomSource, RandomSource, SequenceRandomSource
from chipvm.timing import Event, TimingDriver
from chipvm.rendering import chip8_display_to_rgb, create_color_scheme

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "tick_timers",
    "load_rom",
    "DecodedInstruction",
    "decode",
    "MachineConfig",
    "Quirks",
    "QUIRK_PRESETS",
    "Chip8Error",
    "ConfigError",
    "DecodeError",
    "LoadError",
    "StackOverflow",
    "StackUnderflow",
    "Chip8",
    "Framebuffer",
    "KeyRandomSource",
    "RandomSource",
    "SequenceRandomSource",
    "Event",
    "TimingDriver",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "chip8_display_to_rgb",
    "create_color_scheme",
]
