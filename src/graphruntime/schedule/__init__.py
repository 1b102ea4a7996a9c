"""
Task scheduling.

- timing: delay policies between cycles
- scheduler: the control loop running module ticks
"""

from graphruntime.schedule.scheduler import CycleResult, Scheduler
from graphruntime.schedule.timing import NEVER_RUN, FixedDelayTimingStrategy, TimingStrategy

__all__ = [
    "NEVER_RUN",
    "CycleResult",
    "FixedDelayTimingStrategy",
    "Scheduler",
    "TimingStrategy",
]
