"""Command line entry point: ``chipvm ROM [options]``."""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from chipvm.config import QUIRK_NAMES, QUIRK_PRESETS, INVALID_OPCODE_POLICIES, MachineConfig, Quirks
from chipvm.constants import DEFAULT_INSTRUCTION_RATE, TIMER_FREQUENCY
from chipvm.errors import Chip8Error
from chipvm.headless import describe_error, run_headless
from chipvm.logging import MachineLogger
from chipvm.machine import Chip8
from chipvm.rendering import create_color_scheme, parse_color, save_snapshot
from chipvm.rng import KeyRandomSource


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chipvm", description="CHIP-8 emulator")
    parser.add_argument("rom", type=Path, help="Path to the binary CHIP-8 program")

    machine = parser.add_argument_group("machine")
    machine.add_argument("--rate", type=int, default=DEFAULT_INSTRUCTION_RATE,
                         help="Instructions per second (default: %(default)s)")
    machine.add_argument("--timer-rate", type=int, default=TIMER_FREQUENCY,
                         help="Timer decrements per second (default: %(default)s)")
    machine.add_argument("--quirks", default="modern", choices=sorted(QUIRK_PRESETS),
                         help="Quirk preset (default: %(default)s)")
    for name in QUIRK_NAMES:
        machine.add_argument(f"--{name.replace('_', '-')}", dest=name, default=None,
                             action=argparse.BooleanOptionalAction,
                             help=f"Override the preset's {name} quirk")
    machine.add_argument("--on-invalid", default="skip", choices=INVALID_OPCODE_POLICIES,
                         help="What to do with undefined opcodes (default: %(default)s)")
    machine.add_argument("--seed", type=int, default=0, help="Random seed for CXNN")

    display = parser.add_argument_group("display")
    display.add_argument("--scale", type=int, default=10, help="Display scale (default: %(default)s)")
    display.add_argument("--color-scheme", default="phosphor", help="Named color scheme")
    display.add_argument("--color", type=parse_color, default=None,
                         help="Foreground color, e.g. 0x33ff00 or '#33ff00'")
    display.add_argument("--background", type=parse_color, default=None,
                         help="Background color, e.g. 0x111111")
    display.add_argument("--fps", type=int, default=60, help="Host frames per second")
    display.add_argument("--pitch", type=int, default=220, help="Buzzer pitch in Hz")
    display.add_argument("--grid", action="store_true", help="Outline every pixel with a faint grid")

    run = parser.add_argument_group("run")
    run.add_argument("--headless", type=int, metavar="FRAMES", default=None,
                     help="Run FRAMES frames without a window")
    run.add_argument("--snapshot", type=Path, default=None,
                     help="Write the final frame as PNG (headless mode)")
    run.add_argument("--no-progress", action="store_true", help="Hide the headless progress bar")
    run.add_argument("--log-level", default="INFO",
                     choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    return parser


def config_from_args(args: argparse.Namespace) -> MachineConfig:
    """Build the machine configuration, applying per-quirk overrides to the preset."""
    quirks = Quirks.from_preset(args.quirks)
    overrides = {
        name: getattr(args, name) for name in QUIRK_NAMES if getattr(args, name) is not None
    }
    if overrides:
        quirks = quirks.replace(**overrides)
    return MachineConfig(
        instruction_rate=args.rate,
        timer_rate=args.timer_rate,
        quirks=quirks,
        invalid_opcode_policy=args.on_invalid,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = MachineLogger(log_level=args.log_level)

    try:
        config = config_from_args(args)
        on_color, off_color = create_color_scheme(args.color_scheme)
    except (Chip8Error, ValueError) as error:
        logger.error(str(error))
        return 2
    on_color = args.color or on_color
    off_color = args.background or off_color

    try:
        rom = args.rom.read_bytes()
    except OSError as error:
        logger.error(f"Could not read {args.rom}: {error}")
        return 1

    machine = Chip8(config=config, random_source=KeyRandomSource(args.seed), logger=logger)
    try:
        machine.load(rom)
    except Chip8Error as error:
        logger.error(str(error))
        return 1
    logger.log_config(config)

    if args.headless is not None:
        stats = run_headless(machine, args.headless, fps=args.fps, progress=not args.no_progress)
        logger.log_run_stats(stats, force=True)
        if args.snapshot is not None:
            save_snapshot(machine.framebuffer().pixels, str(args.snapshot), args.scale, on_color, off_color,
                          grid=args.grid)
            logger.info(f"Snapshot saved: {args.snapshot}")
    else:
        from chipvm.frontend import run_window

        run_window(machine, scale=args.scale, on_color=on_color, off_color=off_color,
                   fps=args.fps, pitch=args.pitch, logger=logger, grid=args.grid)

    message = describe_error(machine)
    if machine.halted:
        logger.error(f"Stopped: {message}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
