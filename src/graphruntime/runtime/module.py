"""
Runtime module interface.

A module is a periodic work-unit. The runtime calls `initialize` or
`reinitialize` once at startup depending on the stored fingerprint, then
`tick` once per scheduling cycle inside a store transaction.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from graphruntime.store.base import GraphStore, StoreTransaction
from graphruntime.utils.hashing import compute_config_fingerprint

__all__ = ["RuntimeModule", "BaseRuntimeModule"]


class RuntimeModule(ABC):

    @property
    @abstractmethod
    def module_id(self) -> str:
        ...

    @abstractmethod
    def configuration_fingerprint(self) -> str:
        ...

    @abstractmethod
    def initialize(self, store: GraphStore):
        """One-time setup for a module that has never run on this store."""

    @abstractmethod
    def reinitialize(self, store: GraphStore):
        """Setup again after a configuration change or a forced re-initialization."""

    @abstractmethod
    def tick(self, tx: StoreTransaction):
        """Do one round of periodic work inside `tx`."""

    def shutdown(self):
        pass


class BaseRuntimeModule(RuntimeModule):
    """
    Convenience base holding an id and a settings dict.

    The fingerprint is derived from `module_type` and `config`, so any change
    to the settings is picked up as a configuration change on the next start.
    Initialization does nothing by default and reinitialize delegates to it.
    """

    module_type = "module"

    def __init__(self, module_id: str, config: Optional[Dict[str, Any]] = None):
        if not module_id:
            raise ValueError("module_id must be a non-empty string")
        self._module_id = module_id
        self.config = dict(config or {})

    @property
    def module_id(self) -> str:
        return self._module_id

    def configuration_fingerprint(self) -> str:
        return compute_config_fingerprint(self.module_type, self.config)

    def initialize(self, store: GraphStore):
        pass

    def reinitialize(self, store: GraphStore):
        self.initialize(store)

    def __repr__(self):
        return f"{type(self).__name__}({self.module_id!r})"
