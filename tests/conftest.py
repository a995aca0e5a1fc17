"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chipvm import create_state, Chip8, MachineConfig, Quirks, SequenceRandomSource


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def modern_state():
    """Provide a fresh state with modern quirks."""
    return create_state(quirks=Quirks())


@pytest.fixture
def legacy_state():
    """Provide a fresh state with COSMAC VIP quirks."""
    return create_state(quirks=Quirks.from_preset("cosmac-vip"))


@pytest.fixture
def machine():
    """Provide a machine running 600 instructions per second with fixed random bytes."""
    return Chip8(
        config=MachineConfig(instruction_rate=600),
        random_source=SequenceRandomSource([0xA5, 0x3C]),
    )


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def assemble(*instructions):
    """Encode 16-bit instructions as a big-endian ROM image."""
    return b"".join(instruction.to_bytes(2, "big") for instruction in instructions)
