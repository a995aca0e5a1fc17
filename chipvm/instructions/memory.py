"""CHIP-8 memory and register operations."""

import jax
import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction


def execute_set(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """6XNN - Set VX = NN."""
    return state.replace(V=state.V.at[instruction.x].set(instruction.nn))


def execute_add(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """7XNN - Add NN to VX, carry is discarded and VF untouched."""
    result = (int(state.V[instruction.x]) + instruction.nn) & 0xFF
    return state.replace(V=state.V.at[instruction.x].set(result))


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """ANNN - Set I = NNN."""
    return state.replace(I=jnp.asarray(instruction.nnn, dtype=jnp.uint16))


def execute_random(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """CXNN - Set VX = random & NN.

    Splits the state's key and stores the new key, so executing the same
    state twice draws the same byte.
    """
    key, subkey = jax.random.split(state.rng)
    random_value = state.random_source.next_byte(subkey, int(state.random_draws)) & 0xFF
    return state.replace(
        V=state.V.at[instruction.x].set(random_value & instruction.nn),
        rng=key,
        random_draws=state.random_draws + 1,
    )
