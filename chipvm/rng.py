"""Random byte sources for CXNN.

The PRNG key and the draw counter live in the emulator state. A source only maps
them to a byte and keeps nothing between calls, so replaying a state replays
its random numbers.
"""

from typing import Iterable, Protocol

import jax
import jax.numpy as jnp


class RandomSource(Protocol):
    """Maps the state's subkey and draw index to a random byte."""

    seed: int

    def next_byte(self, key: jax.Array, draw: int) -> int:
        ...


class KeyRandomSource:
    """Random bytes drawn from the ``jax.random`` key carried by the state."""

    def __init__(self, seed: int = 0):
        self.seed = seed

    def next_byte(self, key: jax.Array, draw: int) -> int:
        return int(jax.random.randint(key, shape=(), minval=0, maxval=256, dtype=jnp.int32))


class SequenceRandomSource:
    """Cycle through a fixed sequence of bytes (deterministic tests)."""

    seed = 0

    def __init__(self, values: Iterable[int]):
        self.values = tuple(value & 0xFF for value in values)
        if not self.values:
            raise ValueError("SequenceRandomSource needs at least one value")

    def next_byte(self, key: jax.Array, draw: int) -> int:
        return self.values[draw % len(self.values)]
