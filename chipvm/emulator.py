"""Main CHIP-8 emulator execution engine."""

import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import decode
from chipvm.constants import ADDRESS_MASK, MAX_ROM_SIZE, PROGRAM_START
from chipvm.errors import Chip8Error, LoadError
from chipvm.instructions.system import execute_system_instruction
from chipvm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chipvm.instructions.alu import execute_alu_operation
from chipvm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipvm.instructions.display import execute_display
from chipvm.instructions.misc import execute_misc_instruction

# Indexed by the leading nibble of the opcode.
INSTRUCTION_FAMILIES = [
    execute_system_instruction,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add,
    execute_alu_operation,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_skip_if_key,
    execute_misc_instruction,
]


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    The PC is expected to already point past the instruction. Raises
    ``DecodeError`` for undefined opcodes and ``StackOverflow``/``StackUnderflow``
    for call depth violations.
    """
    decoded_instruction = decode(instruction)
    return INSTRUCTION_FAMILIES[decoded_instruction.opcode](state, decoded_instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> int:
    """Pack two bytes into a 16-bit word."""
    return (int(high) << 8) | int(low)


def fetch(state: EmulatorState) -> tuple[EmulatorState, int]:
    """Fetch next instruction from memory and advance the PC past it."""
    pc = int(state.pc) & ADDRESS_MASK
    instruction = _pack_u16(state.memory[pc], state.memory[(pc + 1) & ADDRESS_MASK])
    return state.replace(pc=jnp.asarray((pc + 2) & ADDRESS_MASK, dtype=jnp.uint16)), instruction


def step(state: EmulatorState) -> EmulatorState:
    """Fetch, decode and execute one instruction.

    Errors are re-raised with the opcode and the PC it was fetched from.
    """
    pc = int(state.pc)
    state, instruction = fetch(state)
    try:
        return execute(state, instruction)
    except Chip8Error as error:
        raise error.locate(instruction, pc)


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement delay and sound timers once, clamping at zero; ends a vblank wait."""
    delay_timer = max(int(state.delay_timer) - 1, 0)
    sound_timer = max(int(state.sound_timer) - 1, 0)
    return state.replace(
        delay_timer=jnp.asarray(delay_timer, dtype=jnp.uint8),
        sound_timer=jnp.asarray(sound_timer, dtype=jnp.uint8),
        vblank_wait=False,
    )


def load_rom(state: EmulatorState, rom_data: bytes) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    rom_data = bytes(rom_data)
    if len(rom_data) > MAX_ROM_SIZE:
        raise LoadError(
            f"ROM is {len(rom_data)} bytes, program memory holds at most {MAX_ROM_SIZE}"
        )
    if not rom_data:
        return state
    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory)
