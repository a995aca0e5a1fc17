"""CHIP-8 control flow instructions."""

import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.constants import ADDRESS_MASK
from chipvm.instructions.system import invalid_instruction
from chipvm.stack import push


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.asarray(instruction.nnn, dtype=jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    state = state.replace(stack=push(state.stack, state.pc))
    return execute_jump(state, instruction)


def make_skip_instruction(condition_fn, register_form: bool = False):
    """Factory for skip instructions.

    Register forms (5XY0, 9XY0) are only defined with a zero low nibble.
    """
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        if register_form and instruction.n != 0:
            return invalid_instruction(state, instruction)
        if bool(condition_fn(state, instruction)):
            return state.replace(pc=(state.pc + 2) & ADDRESS_MASK)
        return state
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y],
    register_form=True,
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y],
    register_form=True,
)


def execute_jump_with_offset_modern(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BXNN - Jump to address NNN + VX (CHIP-48 behavior)."""
    jump_address = (instruction.nnn + int(state.V[instruction.x])) & ADDRESS_MASK
    return state.replace(pc=jnp.asarray(jump_address, dtype=jnp.uint16))


def execute_jump_with_offset_legacy(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0 (COSMAC VIP behavior)."""
    jump_address = (instruction.nnn + int(state.V[0])) & ADDRESS_MASK
    return state.replace(pc=jnp.asarray(jump_address, dtype=jnp.uint16))


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN/BXNN - Jump with offset, operand chosen by the jump quirk."""
    if state.quirks.jump_uses_v0:
        return execute_jump_with_offset_legacy(state, instruction)
    return execute_jump_with_offset_modern(state, instruction)


def execute_skip_if_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """EX9E/EXA1 - Skip if key pressed/not pressed."""
    if instruction.nn not in (0x9E, 0xA1):
        return invalid_instruction(state, instruction)

    key_index = int(state.V[instruction.x]) & 0xF
    key_pressed = bool(state.keypad[key_index])
    is_not_instruction = instruction.nn == 0xA1

    if key_pressed ^ is_not_instruction:
        return state.replace(pc=(state.pc + 2) & ADDRESS_MASK)
    return state
