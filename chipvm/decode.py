"""Opcode field extraction.

Every CHIP-8 instruction is one big-endian 16-bit word. Handlers pick the
fields they need from a :class:`DecodedInstruction`::

    opcode  x   y   n
    |____| |__| |__| |__|
              |___nn___|
          |_____nnn____|
"""

from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Fields of one instruction word; ``raw`` is kept for error reports."""
    raw: int
    opcode: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int


def decode(instruction: int) -> DecodedInstruction:
    """Split a 16-bit word into its nibble, byte and address fields."""
    word = int(instruction) & 0xFFFF
    return DecodedInstruction(
        raw=word,
        opcode=word >> 12,
        x=(word >> 8) & 0xF,
        y=(word >> 4) & 0xF,
        n=word & 0xF,
        nn=word & 0xFF,
        nnn=word & 0xFFF,
    )
