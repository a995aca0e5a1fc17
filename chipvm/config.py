"""Machine configuration: quirk flags and execution rates."""

from flax.struct import dataclass, field

from chipvm.constants import DEFAULT_INSTRUCTION_RATE, TIMER_FREQUENCY
from chipvm.errors import ConfigError

SKIP = "skip"
HALT = "halt"
INVALID_OPCODE_POLICIES = (SKIP, HALT)


@dataclass
class Quirks:
    """Divergent opcode behaviors. ``False`` everywhere is the modern interpretation.

    Attributes:
        vf_reset: 8XY1/8XY2/8XY3 clear VF after the logic operation
        memory_increment: FX55/FX65 leave I pointing past the last register transferred
        display_wait: DXYN waits for the next vertical blank before execution continues
        wrap_sprites: sprite pixels past the screen edge wrap around instead of being clipped
        shift_uses_vy: 8XY6/8XYE shift VY into VX instead of shifting VX in place
        jump_uses_v0: BNNN jumps to NNN + V0 instead of BXNN jumping to XNN + VX
    """
    vf_reset: bool = field(pytree_node=False, default=False)
    memory_increment: bool = field(pytree_node=False, default=False)
    display_wait: bool = field(pytree_node=False, default=False)
    wrap_sprites: bool = field(pytree_node=False, default=False)
    shift_uses_vy: bool = field(pytree_node=False, default=False)
    jump_uses_v0: bool = field(pytree_node=False, default=False)

    @classmethod
    def from_preset(cls, name: str) -> "Quirks":
        """Build the quirk set of a named interpreter variant."""
        key = name.lower().replace("_", "-")
        if key not in QUIRK_PRESETS:
            raise ConfigError(
                f"Unknown quirk preset '{name}'. Available: {list(QUIRK_PRESETS.keys())}"
            )
        return cls(**QUIRK_PRESETS[key])

    def enabled(self) -> list[str]:
        """Names of the flags that are switched on."""
        return [name for name in QUIRK_NAMES if getattr(self, name)]


QUIRK_NAMES = (
    "vf_reset",
    "memory_increment",
    "display_wait",
    "wrap_sprites",
    "shift_uses_vy",
    "jump_uses_v0",
)

QUIRK_PRESETS = {
    "modern": {},
    "cosmac-vip": {
        "vf_reset": True,
        "memory_increment": True,
        "display_wait": True,
        "shift_uses_vy": True,
        "jump_uses_v0": True,
    },
    "xo-chip": {
        "memory_increment": True,
        "wrap_sprites": True,
        "shift_uses_vy": True,
        "jump_uses_v0": True,
    },
}


def _is_rate(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


@dataclass
class MachineConfig:
    """Execution configuration consumed by the machine.

    Attributes:
        instruction_rate: instructions executed per emulated second
        timer_rate: delay/sound timer decrements per second
        quirks: opcode behavior flags
        invalid_opcode_policy: ``"skip"`` continues after an undefined opcode, ``"halt"`` stops
    """
    instruction_rate: int = field(pytree_node=False, default=DEFAULT_INSTRUCTION_RATE)
    timer_rate: int = field(pytree_node=False, default=TIMER_FREQUENCY)
    quirks: Quirks = field(pytree_node=False, default_factory=Quirks)
    invalid_opcode_policy: str = field(pytree_node=False, default=SKIP)

    def __post_init__(self):
        if not _is_rate(self.instruction_rate):
            raise ConfigError(
                f"instruction_rate must be a positive integer, got {self.instruction_rate!r}"
            )
        if not _is_rate(self.timer_rate):
            raise ConfigError(f"timer_rate must be a positive integer, got {self.timer_rate!r}")
        if self.invalid_opcode_policy not in INVALID_OPCODE_POLICIES:
            raise ConfigError(
                f"Unknown invalid opcode policy '{self.invalid_opcode_policy}'. "
                f"Available: {list(INVALID_OPCODE_POLICIES)}"
            )
        if not isinstance(self.quirks, Quirks):
            raise ConfigError(f"quirks must be a Quirks instance, got {type(self.quirks).__name__}")
        # At least one instruction per frame is needed to ever reach the next vblank.
        if self.quirks.display_wait and self.instruction_rate < self.timer_rate:
            raise ConfigError(
                f"display_wait needs instruction_rate >= timer_rate "
                f"({self.instruction_rate} < {self.timer_rate})"
            )

    @property
    def halts_on_invalid_opcode(self) -> bool:
        return self.invalid_opcode_policy == HALT
