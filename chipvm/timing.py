"""Timing driver: turns elapsed wall-clock time into instruction steps and timer ticks.

Time is counted in integer units of ``1 / (instruction_rate * timer_rate)``
seconds. Instruction ``k`` falls on unit ``k * timer_rate`` and timer tick ``m``
on unit ``m * instruction_rate``, so both streams stay exact however the host
slices elapsed time. Only the sub-unit remainder of the elapsed seconds is
carried as a float.
"""

from enum import Enum

from chipvm.constants import TIMER_FREQUENCY
from chipvm.errors import ConfigError

# Absorbs float error when elapsed time is an exact multiple of a period.
_UNIT_TOLERANCE = 1e-6


class Event(Enum):
    INSTRUCTION = "instruction"
    TIMER = "timer"


class TimingDriver:
    """Schedules instruction steps and timer ticks from elapsed time."""

    def __init__(self, instruction_rate: int, timer_rate: int = TIMER_FREQUENCY):
        if instruction_rate <= 0 or timer_rate <= 0:
            raise ConfigError(
                f"Rates must be positive (instruction_rate={instruction_rate}, timer_rate={timer_rate})"
            )
        self.instruction_rate = instruction_rate
        self.timer_rate = timer_rate
        self.clock = 0
        self.remainder = 0.0

    @property
    def units_per_second(self) -> int:
        return self.instruction_rate * self.timer_rate

    def set_rates(self, instruction_rate: int, timer_rate: int) -> None:
        """Change rates, keeping the time elapsed since the last timer tick."""
        if (instruction_rate, timer_rate) == (self.instruction_rate, self.timer_rate):
            return
        since_tick = (self.clock % self.instruction_rate + self.remainder) / self.units_per_second

        self.instruction_rate = instruction_rate
        self.timer_rate = timer_rate
        position = since_tick * self.units_per_second
        self.clock = int(position + _UNIT_TOLERANCE)
        self.remainder = position - self.clock

    def advance(self, elapsed_seconds: float) -> list[Event]:
        """Return the events due within ``elapsed_seconds`` in chronological order.

        When an instruction and a timer tick fall on the same unit the tick comes first.
        """
        if elapsed_seconds < 0:
            raise ValueError(f"elapsed_seconds must be non-negative, got {elapsed_seconds}")

        self.remainder += elapsed_seconds * self.units_per_second
        due = int(self.remainder + _UNIT_TOLERANCE)
        self.remainder -= due
        target = self.clock + due

        events = []
        while True:
            next_instruction = (self.clock // self.timer_rate + 1) * self.timer_rate
            next_timer = (self.clock // self.instruction_rate + 1) * self.instruction_rate
            event_time = min(next_instruction, next_timer)
            if event_time > target:
                break
            self.clock = event_time
            if next_timer == event_time:
                events.append(Event.TIMER)
            if next_instruction == event_time:
                events.append(Event.INSTRUCTION)

        self.clock = target
        return events
