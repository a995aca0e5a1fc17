"""CHIP-8 machine errors.

Every error carries the raw ``opcode`` and the ``pc`` it was fetched from when
known, a short ``kind`` tag and whether it is ``fatal`` (the machine cannot
continue in a well-defined state).
"""

from typing import Optional


class Chip8Error(Exception):
    """Base class for all machine errors."""

    kind = "error"
    fatal = False

    def __init__(self, message: str, opcode: Optional[int] = None, pc: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.opcode = opcode
        self.pc = pc

    def locate(self, opcode: int, pc: int) -> "Chip8Error":
        """Attach the instruction location if not already known."""
        if self.opcode is None:
            self.opcode = opcode
        if self.pc is None:
            self.pc = pc
        return self

    def __str__(self) -> str:
        location = []
        if self.opcode is not None:
            location.append(f"opcode=0x{self.opcode:04X}")
        if self.pc is not None:
            location.append(f"pc=0x{self.pc:03X}")
        if location:
            return f"{self.message} ({', '.join(location)})"
        return self.message


class LoadError(Chip8Error):
    """ROM image does not fit into program memory."""

    kind = "load"


class ConfigError(Chip8Error):
    """Invalid rate, policy or quirk combination."""

    kind = "config"


class DecodeError(Chip8Error):
    """Undefined or unsupported opcode."""

    kind = "decode"


class StackOverflow(Chip8Error):
    """Subroutine call with a full stack."""

    kind = "stack_overflow"
    fatal = True


class StackUnderflow(Chip8Error):
    """Return with an empty stack."""

    kind = "stack_underflow"
    fatal = True
