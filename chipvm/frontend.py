"""pygame window, keyboard and buzzer for a running machine."""

from typing import Optional

import numpy as np
import pygame

from chipvm.constants import NUM_KEYS, SCREEN_HEIGHT, SCREEN_WIDTH
from chipvm.logging import MachineLogger
from chipvm.machine import Chip8
from chipvm.rendering import Color, chip8_display_to_rgb, draw_grid

# COSMAC VIP keypad layout on the left of a QWERTY keyboard:
#   1 2 3 C      1 2 3 4
#   4 5 6 D  ->  Q W E R
#   7 8 9 E      A S D F
#   A 0 B F      Z X C V
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}

SPEED_STEP = 1.25
# The eager engine cannot keep up with real time much beyond this rate.
MAX_INSTRUCTION_RATE = 1500
# Longest stretch of time emulated per host frame; longer stalls are dropped.
MAX_FRAME_TIME = 0.25
SAMPLE_RATE = 44100


def make_buzzer(pitch: int, volume: float = 0.25) -> pygame.mixer.Sound:
    """One period of a square wave, looped while the sound timer runs."""
    period = max(SAMPLE_RATE // pitch, 2)
    wave = np.where(np.arange(period) < period // 2, volume, -volume)
    return pygame.sndarray.make_sound((wave * 32767).astype(np.int16))


def init_buzzer(pitch: int, logger: MachineLogger):
    """Open the mixer; returns ``None`` when no audio device is available."""
    try:
        pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
    except pygame.error as error:
        logger.warning(f"Audio disabled: {error}")
        return None
    return make_buzzer(pitch)


def run_window(
    machine: Chip8,
    scale: int = 10,
    on_color: Color = (51, 255, 0),
    off_color: Color = (17, 17, 17),
    fps: int = 60,
    pitch: int = 220,
    logger: Optional[MachineLogger] = None,
    grid: bool = False,
) -> Chip8:
    """Main emulator loop.

    Controls: ESC quits, P pauses, Backspace resets, = and - change speed.
    With ``grid`` a faint line in the background color outlines every pixel.
    """
    logger = logger if logger is not None else machine.logger

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
    pygame.display.set_caption("CHIP-8")
    clock = pygame.time.Clock()
    buzzer = init_buzzer(pitch, logger)

    keypad = [False] * NUM_KEYS
    running = True
    paused = False
    buzzing = False
    halt_reported = False

    logger.info("Controls: ESC=Quit, P=Pause, Backspace=Reset, =/-=Speed")

    try:
        while running:
            elapsed = frame_elapsed(clock.tick(fps))

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_p:
                        paused = not paused
                        logger.info("Paused" if paused else "Resumed")
                    elif event.key == pygame.K_BACKSPACE:
                        machine.reset()
                        halt_reported = False
                        logger.info("Reset")
                    elif event.key in (pygame.K_EQUALS, pygame.K_MINUS):
                        change_speed(machine, faster=event.key == pygame.K_EQUALS)
                        logger.info(f"Speed: {machine.config.instruction_rate} instructions/s")
                    elif event.key in KEY_MAP:
                        keypad[KEY_MAP[event.key]] = True
                elif event.type == pygame.KEYUP:
                    if event.key in KEY_MAP:
                        keypad[KEY_MAP[event.key]] = False

            if not paused and not machine.halted:
                machine.set_keys(keypad)
                machine.advance(elapsed)

            if machine.halted and not halt_reported:
                halt_reported = True
                logger.error("Machine halted, press Backspace to reset or ESC to quit")

            beeping = machine.beeping() and not paused and not machine.halted
            if buzzer is not None and beeping != buzzing:
                if beeping:
                    buzzer.play(loops=-1)
                else:
                    buzzer.stop()
            buzzing = beeping

            frame = machine.framebuffer()
            if frame.dirty:
                rgb = chip8_display_to_rgb(frame.pixels, scale, on_color, off_color)
                if grid:
                    rgb = draw_grid(rgb, scale, off_color)
                pygame.surfarray.blit_array(screen, rgb.swapaxes(0, 1))
                pygame.display.flip()

            logger.log_run_stats({
                "instructions": machine.instruction_count,
                "rate": machine.config.instruction_rate,
                "fps": float(clock.get_fps()),
            })
    finally:
        pygame.quit()

    return machine


def frame_elapsed(milliseconds: int) -> float:
    """Seconds to emulate for a host frame, capped at ``MAX_FRAME_TIME``."""
    return min(milliseconds / 1000.0, MAX_FRAME_TIME)


def change_speed(machine: Chip8, faster: bool):
    """Scale the instruction rate between the timer rate and ``MAX_INSTRUCTION_RATE``.

    A rate already above the cap (set on the command line) is never raised further.
    """
    config = machine.config
    if faster:
        rate = max(min(int(config.instruction_rate * SPEED_STEP), MAX_INSTRUCTION_RATE),
                   config.instruction_rate)
    else:
        rate = max(int(config.instruction_rate / SPEED_STEP), config.timer_rate)
    machine.configure(config.replace(instruction_rate=rate))
