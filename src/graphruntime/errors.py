"""
Error taxonomy for the graph runtime.

- CorruptRuntimeState: fatal, the runtime refuses to start
- ModuleTaskError: one module's tick failed, the cycle continues
- StoreError / StoreUnavailable: store access failures, the latter retried
- TraversalError: a crawl was aborted by a store failure
"""

__all__ = [
    "GraphRuntimeError",
    "CorruptRuntimeState",
    "ModuleTaskError",
    "StoreError",
    "StoreUnavailable",
    "TraversalError",
]


class GraphRuntimeError(Exception):
    """Base class for all runtime errors."""


class CorruptRuntimeState(GraphRuntimeError):
    """Runtime bookkeeping in the store is inconsistent (e.g. two anchor nodes)."""


class ModuleTaskError(GraphRuntimeError):
    """A module's tick raised. Carries the module id and the original error."""

    def __init__(self, module_id: str, cause: BaseException):
        super().__init__(f"Module {module_id} failed: {cause}")
        self.module_id = module_id
        self.cause = cause


class StoreError(GraphRuntimeError):
    """The graph store rejected or failed an operation."""


class StoreUnavailable(StoreError):
    """The graph store cannot be reached right now."""


class TraversalError(GraphRuntimeError):
    """A store failure aborted a traversal."""
