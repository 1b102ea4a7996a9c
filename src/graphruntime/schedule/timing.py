"""
Timing strategies: how long to wait before the next task cycle.
"""

from abc import ABC, abstractmethod

__all__ = ["NEVER_RUN", "TimingStrategy", "FixedDelayTimingStrategy"]

# Passed as the last task duration before the first cycle has run
NEVER_RUN = -2


class TimingStrategy(ABC):

    @abstractmethod
    def next_delay(self, last_task_duration_ms: int) -> int:
        """
        Return the delay in ms before the next task cycle.

        Args:
            last_task_duration_ms: Duration of the previous cycle, or NEVER_RUN
        """


class FixedDelayTimingStrategy(TimingStrategy):
    """
    Schedules cycles in regular intervals.

    The first cycle starts after `initial_delay` ms; every later one after
    `delay` ms, however long the previous cycle took.
    """

    def __init__(self, delay: int, initial_delay: int = 1000):
        if delay < 0 or initial_delay < 0:
            raise ValueError("Delays must not be negative")
        self.delay = delay
        self.initial_delay = initial_delay

    def next_delay(self, last_task_duration_ms: int) -> int:
        if last_task_duration_ms == NEVER_RUN:
            return self.initial_delay
        return self.delay

    def __repr__(self):
        return f"FixedDelayTimingStrategy(delay={self.delay}, initial_delay={self.initial_delay})"
