#!/usr/bin/env python3
"""
Graph Runtime Daemon

Runs the registered modules against Neo4j until interrupted. On start every
module is initialized, re-initialized or skipped depending on the
configuration fingerprint stored on the runtime anchor node; afterwards the
modules' ticks run in fixed-delay cycles.

Usage:
    python -m graphruntime.processor.daemon [options]

Options:
    --modules FILE       YAML file listing the modules (default: one crawler)
    --delay-ms MS        Delay between cycles (default: $RUNTIME_DELAY_MS or 2000)
    --force-init ID      Re-initialize a module on start (repeatable)
    --single             Run one cycle and exit
    --stats              Show stored module records and exit
    --verbose, -v        Enable debug logging
"""

import argparse
import json
import logging
import signal
import sys
from typing import List, Optional

from graphruntime.core.runtime import GraphRuntime
from graphruntime.errors import CorruptRuntimeState, StoreError
from graphruntime.processor.config import build_modules, default_modules, get_config, load_modules_file
from graphruntime.runtime.context import RuntimeContext
from graphruntime.runtime.module import RuntimeModule
from graphruntime.runtime.records import ForcedReinit
from graphruntime.runtime.registry import ModuleRegistry
from graphruntime.schedule.timing import FixedDelayTimingStrategy
from graphruntime.store.base import GraphStore

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def open_store(database: Optional[str] = None) -> GraphStore:
    """Open the Neo4j store configured through NEO4J_* environment variables."""
    from graphruntime.store.neo4j_store import Neo4jGraphStore
    return Neo4jGraphStore(database=database)


class RuntimeDaemon:
    """
    Owns a GraphRuntime and its signal handling.

    The daemon:
    1. Registers the configured modules
    2. Starts the runtime (lifecycle decisions, stale record cleanup)
    3. Runs scheduling cycles until SIGINT/SIGTERM
    """

    def __init__(
        self,
        store: GraphStore,
        modules: List[RuntimeModule],
        delay_ms: Optional[int] = None,
        initial_delay_ms: Optional[int] = None,
        poll_interval: Optional[float] = None,
        force_init: Optional[List[str]] = None,
    ):
        config = get_config()

        self.store = store
        self.timing_strategy = FixedDelayTimingStrategy(
            config["delay_ms"] if delay_ms is None else delay_ms,
            initial_delay=config["initial_delay_ms"] if initial_delay_ms is None else initial_delay_ms,
        )
        self.runtime = GraphRuntime(
            store,
            timing_strategy=self.timing_strategy,
            poll_interval=config["poll_interval"] if poll_interval is None else poll_interval,
        )

        forced = set(force_init or [])
        unknown = forced - {m.module_id for m in modules}
        if unknown:
            raise ValueError(f"Cannot force initialization of unknown module(s): {sorted(unknown)}")

        for module in modules:
            self.runtime.register_module(module, force_init=module.module_id in forced)

    def install_signal_handlers(self):
        def handle_signal(signum, frame):
            logger.info("Shutdown requested (signal %d)...", signum)
            self.runtime.stop()

        signal.signal(signal.SIGINT, handle_signal)
        signal.signal(signal.SIGTERM, handle_signal)

    def run(self, max_cycles: Optional[int] = None) -> int:
        """Start the runtime and run cycles. Returns the number of cycles run."""
        self.runtime.start()
        for module_id, state in self.runtime.lifecycle.items():
            logger.info("  %s: %s", module_id, state.value)

        cycles = self.runtime.run(max_cycles=max_cycles)

        scheduler = self.runtime.scheduler
        logger.info("Daemon stopped: %d cycle(s), %d failed tick(s)",
                    scheduler.cycles_run, scheduler.ticks_failed)
        return cycles


def get_stats(store: GraphStore) -> dict:
    """Describe the module records stored on the anchor node."""
    registry = ModuleRegistry(RuntimeContext.create(store))
    modules = {}
    for module_id, record in sorted(registry.records().items()):
        if isinstance(record, ForcedReinit):
            modules[module_id] = {"state": "forced_reinit", "timestamp": record.timestamp}
        else:
            modules[module_id] = {"state": "initialized", "fingerprint": record.value}
    return {"modules": modules}


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Run graph runtime modules against Neo4j"
    )
    parser.add_argument(
        "--modules", "-m",
        help="YAML file listing the modules to run"
    )
    parser.add_argument(
        "--delay-ms",
        type=int,
        help="Delay between cycles in milliseconds"
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        help="Default crawl depth for crawler modules"
    )
    parser.add_argument(
        "--force-init",
        action="append",
        default=[],
        metavar="MODULE_ID",
        help="Re-initialize this module on start (repeatable)"
    )
    parser.add_argument(
        "--database", "-d",
        help="Neo4j database (default: $NEO4J_DATABASE)"
    )
    parser.add_argument(
        "--single", "-1",
        action="store_true",
        help="Run one cycle and exit"
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show stored module records and exit"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    args = parser.parse_args()
    configure_logging(args.verbose)

    store = open_store(args.database)
    try:
        if args.stats:
            print(json.dumps(get_stats(store), indent=2))
            return

        if args.modules:
            modules = build_modules(load_modules_file(args.modules), max_depth=args.max_depth)
        else:
            modules = default_modules(max_depth=args.max_depth)

        daemon = RuntimeDaemon(
            store,
            modules,
            delay_ms=args.delay_ms,
            initial_delay_ms=0 if args.single else None,
            force_init=args.force_init,
        )
        daemon.install_signal_handlers()
        daemon.run(max_cycles=1 if args.single else None)

    except CorruptRuntimeState as e:
        logger.critical("%s", e)
        sys.exit(2)
    except StoreError as e:
        logger.error("Graph store error: %s", e)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        store.close()


if __name__ == "__main__":
    main()
