"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.constants import ADDRESS_MASK, SCREEN_WIDTH, SCREEN_HEIGHT

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def sprite_mask(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    """Boolean (64, 32) mask of the pixels the DXYN sprite toggles."""
    sprite_x = int(state.V[instruction.x]) % SCREEN_WIDTH
    sprite_y = int(state.V[instruction.y]) % SCREEN_HEIGHT

    col_offset = xx - sprite_x
    row_offset = yy - sprite_y
    if state.quirks.wrap_sprites:
        col_offset = col_offset % SCREEN_WIDTH
        row_offset = row_offset % SCREEN_HEIGHT

    in_sprite = (col_offset >= 0) & (col_offset < 8) & (row_offset >= 0) & (row_offset < instruction.n)

    sprite_bytes = state.memory[(int(state.I) + row_offset) & ADDRESS_MASK]
    bits = (sprite_bytes >> jnp.clip(7 - col_offset, 0, 7)) & 1
    return (bits == 1) & in_sprite


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Pixels are XORed onto the display. VF is set when any lit pixel is erased.
    """
    sprite = sprite_mask(state, instruction)
    collision = bool(jnp.any(state.display & sprite))
    changed = bool(jnp.any(sprite))

    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[15].set(int(collision)),
        display_dirty=state.display_dirty or changed,
        vblank_wait=state.quirks.display_wait,
    )
