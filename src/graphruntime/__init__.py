"""
Graph Runtime - periodic modules over a shared graph store.

This package provides:
- A module lifecycle keyed on configuration fingerprints stored in the graph
- A single-loop scheduler with pluggable timing strategies
- A depth-bounded graph crawler
- In-memory and Neo4j store backends
"""

__version__ = "0.1.0"
__author__ = "Graph Runtime Project"

from .core.runtime import GraphRuntime
from .crawler import CrawlerModule, GraphCrawler, TraversalContext
from .errors import (
    CorruptRuntimeState,
    GraphRuntimeError,
    ModuleTaskError,
    StoreError,
    StoreUnavailable,
    TraversalError,
)
from .runtime import BaseRuntimeModule, ModuleRegistry, RuntimeModule
from .schedule import FixedDelayTimingStrategy, Scheduler
from .store import InMemoryGraphStore, Neo4jGraphStore

__all__ = [
    "__version__",
    "BaseRuntimeModule",
    "CorruptRuntimeState",
    "CrawlerModule",
    "FixedDelayTimingStrategy",
    "GraphCrawler",
    "GraphRuntime",
    "GraphRuntimeError",
    "InMemoryGraphStore",
    "ModuleRegistry",
    "ModuleTaskError",
    "Neo4jGraphStore",
    "RuntimeModule",
    "Scheduler",
    "StoreError",
    "StoreUnavailable",
    "TraversalContext",
    "TraversalError",
]
