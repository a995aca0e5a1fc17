"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.constants import ADDRESS_MASK, FONT_CHAR_SIZE, FONT_START
from chipvm.instructions.system import invalid_instruction


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register."""
    new_i = (int(state.I) + int(state.V[instruction.x])) & ADDRESS_MASK
    return state.replace(I=jnp.asarray(new_i, dtype=jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for a key press.

    Without a fresh press the PC is rewound onto this instruction so the next
    step executes it again. The key that satisfies the wait is latched into
    ``previous_keypad`` so one press ends one wait.
    """
    fresh_presses = state.keypad & ~state.previous_keypad
    if not bool(jnp.any(fresh_presses)):
        return state.replace(pc=(state.pc - 2) & ADDRESS_MASK, awaiting_key=True)

    pressed_key = int(jnp.argmax(fresh_presses))
    return state.replace(
        V=state.V.at[instruction.x].set(pressed_key),
        previous_keypad=state.previous_keypad.at[pressed_key].set(True),
        awaiting_key=False,
    )


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + (int(state.V[instruction.x]) & 0xF) * FONT_CHAR_SIZE
    return state.replace(I=jnp.asarray(font_address, dtype=jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = int(state.V[instruction.x])
    digits = jnp.array([value // 100, (value // 10) % 10, value % 10], dtype=jnp.uint8)

    indices = (jnp.arange(3) + int(state.I)) & ADDRESS_MASK
    return state.replace(memory=state.memory.at[indices].set(digits))


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    count = instruction.x + 1
    indices = (jnp.arange(count) + int(state.I)) & ADDRESS_MASK
    new_memory = state.memory.at[indices].set(state.V[:count])

    if state.quirks.memory_increment:
        new_i = (int(state.I) + count) & ADDRESS_MASK
        return state.replace(memory=new_memory, I=jnp.asarray(new_i, dtype=jnp.uint16))
    return state.replace(memory=new_memory)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    count = instruction.x + 1
    indices = (jnp.arange(count) + int(state.I)) & ADDRESS_MASK
    new_V = state.V.at[:count].set(state.memory[indices])

    if state.quirks.memory_increment:
        new_i = (int(state.I) + count) & ADDRESS_MASK
        return state.replace(V=new_V, I=jnp.asarray(new_i, dtype=jnp.uint16))
    return state.replace(V=new_V)


MISC_INSTRUCTIONS = {
    0x07: execute_get_delay_timer,
    0x0A: execute_wait_for_key,
    0x15: execute_set_delay_timer,
    0x18: execute_set_sound_timer,
    0x1E: execute_add_to_index,
    0x29: execute_font_character,
    0x33: execute_bcd_conversion,
    0x55: execute_store_registers,
    0x65: execute_load_registers,
}


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch misc instructions on the low byte."""
    handler = MISC_INSTRUCTIONS.get(instruction.nn, invalid_instruction)
    return handler(state, instruction)
