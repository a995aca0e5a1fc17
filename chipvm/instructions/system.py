"""CHIP-8 system instructions (0x0xxx)."""

import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.errors import DecodeError
from chipvm.stack import pop


def invalid_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Undefined opcode."""
    raise DecodeError("Undefined instruction", opcode=instruction.raw)


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display), display_dirty=True)


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack)
    return state.replace(stack=stack, pc=address)


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions.

    0NNN machine code routines of the original interpreter cannot be emulated
    and are reported as undefined.
    """
    if instruction.raw == 0x00E0:
        return execute_clear_screen(state, instruction)
    if instruction.raw == 0x00EE:
        return execute_return(state, instruction)
    return invalid_instruction(state, instruction)
