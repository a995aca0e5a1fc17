"""CHIP-8 emulator state structures."""

from typing import Optional

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chipvm.config import Quirks
from chipvm.constants import (
    FONT_DATA, FONT_START, MEMORY_SIZE, NUM_KEYS, NUM_REGISTERS, PROGRAM_START,
    SCREEN_HEIGHT, SCREEN_WIDTH, STACK_SIZE,
)
from chipvm.rng import KeyRandomSource, RandomSource


@dataclass
class StackState:
    """Return addresses of active subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    ``display`` is indexed ``[x, y]``. ``previous_keypad`` is the key state that was
    current before the host last wrote ``keypad``; keys pressed now but not then
    are fresh presses for FX0A.
    """
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = field(
        default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_)
    )
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    previous_keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    rng: jax.Array = field(default_factory=lambda: jax.random.PRNGKey(0))
    random_draws: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint32))
    display_dirty: bool = field(pytree_node=False, default=True)
    awaiting_key: bool = field(pytree_node=False, default=False)
    vblank_wait: bool = field(pytree_node=False, default=False)
    quirks: Quirks = field(pytree_node=False, default_factory=Quirks)
    random_source: Optional[RandomSource] = field(pytree_node=False, default=None)


def create_state(
    quirks: Optional[Quirks] = None,
    random_source: Optional[RandomSource] = None,
) -> EmulatorState:
    """Create initial emulator state with font data loaded.

    The PRNG key is seeded from ``random_source.seed``.
    """
    random_source = random_source if random_source is not None else KeyRandomSource()
    state = EmulatorState(
        rng=jax.random.PRNGKey(random_source.seed),
        quirks=quirks if quirks is not None else Quirks(),
        random_source=random_source,
    )
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))
