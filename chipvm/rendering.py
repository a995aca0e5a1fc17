"""CHIP-8 rendering utilities for visualization."""

from typing import Tuple

import numpy as np
from PIL import Image

Color = Tuple[int, int, int]

# Opacity of the pixel grid lines drawn in the background color.
GRID_ALPHA = 0x22 / 0xFF


def chip8_display_to_rgb(
    display: np.ndarray,
    scale: int = 8,
    on_color: Color = (0, 255, 0),
    off_color: Color = (0, 0, 0),
) -> np.ndarray:
    """Convert CHIP-8 boolean display to RGB array with optional upscaling.

    Args:
        display: Boolean array of shape (64, 32) representing CHIP-8 display
        scale: Upscaling factor for better visibility (default: 8x)
        on_color: RGB color for "on" pixels (default: green)
        off_color: RGB color for "off" pixels (default: black)

    Returns:
        RGB array of shape (height*scale, width*scale, 3) with uint8 values
    """
    if scale < 1:
        raise ValueError(f"scale must be at least 1, got {scale}")
    pixels = np.array(display, dtype=np.bool_)

    # Original: (64 width, 32 height) -> Display: (32 height, 64 width)
    pixels = pixels.T
    height, width = pixels.shape

    rgb_frame = np.zeros((height, width, 3), dtype=np.uint8)

    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    # Apply upscaling using nearest neighbor interpolation
    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


def create_color_scheme(
    scheme: str = "classic",
) -> Tuple[Color, Color]:
    """Get predefined color schemes for CHIP-8 rendering.

    Args:
        scheme: Color scheme name ("classic", "phosphor", "amber", "white", "blue", "retro")

    Returns:
        Tuple of (on_color, off_color) as RGB tuples
    """
    schemes = {
        "classic": ((0, 255, 0), (0, 0, 0)),  # Green on black
        "phosphor": ((51, 255, 0), (17, 17, 17)),  # Bright green on charcoal
        "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
        "white": ((255, 255, 255), (0, 0, 0)),  # White on black
        "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
        "retro": ((255, 255, 0), (64, 0, 64)),  # Yellow on purple
    }

    if scheme not in schemes:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(schemes.keys())}"
        )

    return schemes[scheme]


def parse_color(value: str) -> Color:
    """Parse ``#RRGGBB``, ``0xRRGGBB`` or ``0xAARRGGBB`` into an RGB tuple (alpha dropped)."""
    text = value.strip().lower()
    if text.startswith("#"):
        text = text[1:]
    elif text.startswith("0x"):
        text = text[2:]
    if len(text) not in (6, 8):
        raise ValueError(f"Invalid color '{value}', expected 6 or 8 hex digits")
    try:
        packed = int(text, 16)
    except ValueError:
        raise ValueError(f"Invalid color '{value}', expected hex digits") from None
    return (packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF


def draw_grid(rgb: np.ndarray, scale: int, color: Color, alpha: float = GRID_ALPHA) -> np.ndarray:
    """Blend a faint line along the top and left edge of every upscaled pixel.

    Returns ``rgb`` unchanged when ``scale`` is too small to leave room for a grid.
    """
    if scale < 2:
        return rgb
    lines = np.zeros(rgb.shape[:2], dtype=np.bool_)
    lines[::scale, :] = True
    lines[:, ::scale] = True

    blended = rgb.astype(np.float32)
    blended[lines] = blended[lines] * (1 - alpha) + np.asarray(color, dtype=np.float32) * alpha
    return np.round(blended).astype(np.uint8)


def save_snapshot(
    display: np.ndarray,
    filename: str,
    scale: int = 8,
    on_color: Color = (0, 255, 0),
    off_color: Color = (0, 0, 0),
    grid: bool = False,
) -> None:
    """Write the display as a PNG image, optionally with the pixel grid."""
    rgb = chip8_display_to_rgb(display, scale, on_color, off_color)
    if grid:
        rgb = draw_grid(rgb, scale, off_color)
    Image.fromarray(rgb).save(filename)
