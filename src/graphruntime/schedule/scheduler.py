"""
Scheduler: the runtime's single control loop.

Each cycle runs the tick of every registered module, in registration order,
each in its own store transaction. Between cycles the loop waits for the
delay chosen by the timing strategy. A stop request is honoured at the next
cycle boundary; a running transaction is never interrupted.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from graphruntime.errors import ModuleTaskError, StoreUnavailable
from graphruntime.runtime.module import RuntimeModule
from graphruntime.schedule.timing import NEVER_RUN, TimingStrategy
from graphruntime.store.base import GraphStore

__all__ = ["CycleResult", "Scheduler"]

logger = logging.getLogger(__name__)


@dataclass
class CycleResult:
    """Outcome of one pass over all modules."""
    succeeded: List[str] = field(default_factory=list)
    failures: Dict[str, ModuleTaskError] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)   # Not run because the store went away
    duration_ms: int = 0

    @property
    def store_unavailable(self) -> bool:
        return bool(self.skipped)


class Scheduler:
    """
    Drives periodic module ticks against a store.

    Args:
        store: Store the modules operate on
        modules: Modules to tick, in order
        timing_strategy: Decides the delay between cycles
        poll_interval: Seconds to wait between availability checks
        availability_timeout_ms: Timeout passed to store.is_available()
        stop_event: Stop event shared with the owner (a new one if None)
    """

    def __init__(
        self,
        store: GraphStore,
        modules: Sequence[RuntimeModule],
        timing_strategy: TimingStrategy,
        poll_interval: float = 5.0,
        availability_timeout_ms: int = 0,
        stop_event: Optional[threading.Event] = None,
    ):
        self.store = store
        self.modules = list(modules)
        self.timing_strategy = timing_strategy
        self.poll_interval = poll_interval
        self.availability_timeout_ms = availability_timeout_ms

        self._stop_event = stop_event or threading.Event()
        self.cycles_run = 0
        self.ticks_failed = 0

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()

    def stop(self):
        """Ask the loop to exit at the next cycle boundary."""
        self._stop_event.set()

    def run_tick(self, module: RuntimeModule):
        """Run one module tick in its own transaction, rolled back if it raises."""
        with self.store.begin_transaction() as tx:
            module.tick(tx)

    def run_cycle(self) -> CycleResult:
        """
        Tick every module once.

        A failing tick is logged and recorded; the remaining modules still run.
        If the store becomes unreachable, the rest of the cycle is skipped.
        """
        result = CycleResult()
        started = time.monotonic()

        for index, module in enumerate(self.modules):
            try:
                self.run_tick(module)
                result.succeeded.append(module.module_id)
            except StoreUnavailable as e:
                logger.warning("Store became unavailable during cycle: %s", e)
                result.skipped = [m.module_id for m in self.modules[index:]]
                break
            except Exception as e:
                error = ModuleTaskError(module.module_id, e)
                result.failures[module.module_id] = error
                self.ticks_failed += 1
                logger.exception("Task of module %s failed, rolled back", module.module_id)

        result.duration_ms = int((time.monotonic() - started) * 1000)
        self.cycles_run += 1
        return result

    def wait_for_store(self) -> bool:
        """
        Block until the store reports itself available.

        Returns:
            True once available, False if a stop was requested while waiting
        """
        reported = False
        while not self.stop_requested:
            if self.store.is_available(self.availability_timeout_ms):
                if reported:
                    logger.info("Store is available again, resuming")
                return True
            if not reported:
                logger.warning("Store is not available, pausing task cycles")
                reported = True
            self._stop_event.wait(self.poll_interval)
        return False

    def run_loop(self, max_cycles: Optional[int] = None) -> int:
        """
        Main scheduling loop.

        Args:
            max_cycles: Stop after this many cycles (runs until stopped if None)

        Returns:
            Number of cycles run
        """
        last_duration = NEVER_RUN
        cycles = 0

        logger.info("Scheduler starting with %d module(s), %r",
                    len(self.modules), self.timing_strategy)

        while not self.stop_requested:
            if max_cycles is not None and cycles >= max_cycles:
                break

            delay_ms = self.timing_strategy.next_delay(last_duration)
            if self._stop_event.wait(delay_ms / 1000.0):
                break

            if not self.wait_for_store():
                break

            result = self.run_cycle()
            cycles += 1
            if result.store_unavailable:
                continue

            last_duration = result.duration_ms
            logger.debug("Cycle %d finished in %d ms (%d ok, %d failed)",
                         cycles, result.duration_ms, len(result.succeeded), len(result.failures))

        logger.info("Scheduler stopped after %d cycle(s)", cycles)
        return cycles
