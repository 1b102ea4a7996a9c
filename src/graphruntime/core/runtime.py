"""
GraphRuntime: registers modules, runs their lifecycle once, then schedules
their ticks.

Usage:
    runtime = GraphRuntime(store)
    runtime.register_module(CrawlerModule("crawler"))
    runtime.run()          # blocks until runtime.stop()
"""

import logging
import threading
from typing import Dict, List, Optional, Set

from graphruntime.errors import StoreUnavailable
from graphruntime.runtime.context import RuntimeContext
from graphruntime.runtime.module import RuntimeModule
from graphruntime.runtime.records import LifecycleState
from graphruntime.runtime.registry import ModuleRegistry
from graphruntime.schedule.scheduler import Scheduler
from graphruntime.schedule.timing import FixedDelayTimingStrategy, TimingStrategy
from graphruntime.store.base import GraphStore

__all__ = ["GraphRuntime"]

logger = logging.getLogger(__name__)


class GraphRuntime:
    """
    Args:
        store: Store the runtime and its modules operate on
        timing_strategy: Delay policy between cycles (fixed 2s if None)
        poll_interval: Seconds between availability checks while the store is down
    """

    def __init__(
        self,
        store: GraphStore,
        timing_strategy: Optional[TimingStrategy] = None,
        poll_interval: float = 5.0,
    ):
        self.store = store
        self.timing_strategy = timing_strategy or FixedDelayTimingStrategy(2000)
        self.poll_interval = poll_interval

        self.modules: List[RuntimeModule] = []
        self._forced: Set[str] = set()
        self._stop_event = threading.Event()
        self.context: Optional[RuntimeContext] = None
        self.registry: Optional[ModuleRegistry] = None
        self.scheduler: Optional[Scheduler] = None
        self.lifecycle: Dict[str, LifecycleState] = {}

    @property
    def started(self) -> bool:
        return self.context is not None

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()

    def register_module(self, module: RuntimeModule, force_init: bool = False):
        """
        Add a module. Must be called before start().

        Args:
            module: Module to register; its id must be unique
            force_init: Re-initialize the module on start even if its configuration is unchanged
        """
        if self.scheduler is not None:
            raise RuntimeError("Modules must be registered before the runtime is started")
        if any(m.module_id == module.module_id for m in self.modules):
            raise ValueError(f"Module with id {module.module_id} is already registered")

        logger.info("Registering module %s", module.module_id)
        self.modules.append(module)
        if force_init:
            self._forced.add(module.module_id)

    def start(self) -> Dict[str, LifecycleState]:
        """
        Locate the anchor node and bring every module up to date. Runs once.

        Waits for the store while it is unavailable. Returns without
        initializing anything if a stop is requested while waiting.

        Raises:
            CorruptRuntimeState: If the store holds more than one anchor node
        """
        if self.started:
            return self.lifecycle

        if self.scheduler is None:
            self.scheduler = Scheduler(
                self.store,
                self.modules,
                self.timing_strategy,
                poll_interval=self.poll_interval,
                stop_event=self._stop_event,
            )

        logger.info("Starting graph runtime...")
        while self.scheduler.wait_for_store():
            try:
                context = RuntimeContext.create(self.store)
                registry = ModuleRegistry(context)
                for module_id in sorted(self._forced):
                    registry.force_reinitialization(module_id)
                    self._forced.discard(module_id)
                self.lifecycle = registry.initialize_modules(self.modules)
            except StoreUnavailable as e:
                logger.warning("Store became unavailable during startup, retrying: %s", e)
                continue

            self.context = context
            self.registry = registry
            logger.info("Graph runtime started with %d module(s)", len(self.modules))
            break
        else:
            logger.info("Stop requested before the graph runtime was started")

        return self.lifecycle

    def run(self, max_cycles: Optional[int] = None) -> int:
        """
        Start if needed, then run the scheduling loop until stopped.

        Modules are shut down when the loop exits.

        Returns:
            Number of cycles run
        """
        self.start()
        try:
            return self.scheduler.run_loop(max_cycles=max_cycles)
        finally:
            self.shutdown_modules()

    def stop(self):
        """Ask the runtime to stop; honoured during startup or at the next cycle boundary."""
        self._stop_event.set()

    def shutdown_modules(self):
        for module in self.modules:
            try:
                module.shutdown()
            except Exception:
                logger.exception("Shutdown of module %s failed", module.module_id)
        logger.info("Graph runtime stopped")
