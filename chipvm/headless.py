"""Run a machine without a window, with a progress bar."""

import time
from typing import Any, Dict, Optional

from tqdm import tqdm

from chipvm.machine import Chip8


def run_headless(
    machine: Chip8,
    frames: int,
    fps: int = 60,
    progress: bool = True,
) -> Dict[str, Any]:
    """Advance ``machine`` by ``frames`` host frames of ``1 / fps`` seconds each.

    Stops early when the machine halts.

    Returns:
        Run statistics: frames, instructions, timer ticks, wall time,
        instructions per wall-clock second and whether the machine halted.
    """
    if frames < 0:
        raise ValueError(f"frames must be non-negative, got {frames}")
    if fps <= 0:
        raise ValueError(f"fps must be positive, got {fps}")

    frame_time = 1.0 / fps
    start_instructions = machine.instruction_count
    start_ticks = machine.tick_count
    start_time = time.time()
    frames_run = 0

    with tqdm(total=frames, desc="Emulating", unit="frame", disable=not progress) as progress_bar:
        for _ in range(frames):
            machine.advance(frame_time)
            frames_run += 1
            progress_bar.update(1)
            if machine.halted:
                break

    elapsed = time.time() - start_time
    instructions = machine.instruction_count - start_instructions
    return {
        "frames": frames_run,
        "instructions": instructions,
        "ticks": machine.tick_count - start_ticks,
        "seconds": elapsed,
        "ips": instructions / elapsed if elapsed > 0 else 0.0,
        "halted": machine.halted,
    }


def describe_error(machine: Chip8) -> Optional[str]:
    """One-line description of the machine's last error, if any."""
    error = machine.last_error()
    return None if error is None else f"{error.kind}: {error}"
