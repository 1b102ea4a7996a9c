"""
Module registry and lifecycle manager.

Persists one record per module on the anchor node and decides, once per
startup, whether each module must be initialized, re-initialized or left
alone. Records of modules that are no longer registered are purged.
"""

import logging
import time
from typing import Dict, Iterable, List, Optional, Sequence

from graphruntime.runtime.context import RuntimeContext
from graphruntime.runtime.module import RuntimeModule
from graphruntime.runtime.records import (
    Fingerprint,
    ForcedReinit,
    LifecycleState,
    ModuleRecord,
    decide_lifecycle,
    decode_record,
    encode_record,
)
from graphruntime.store.base import StoreTransaction, execute_in_transaction

__all__ = ["ModuleRegistry"]

logger = logging.getLogger(__name__)


class ModuleRegistry:
    """
    Reads and writes module records on the anchor node.

    Every public method runs in its own transaction.
    """

    def __init__(self, context: RuntimeContext):
        self.context = context

    def _in_tx(self, callback):
        return execute_in_transaction(self.context.store, callback)

    def records(self) -> Dict[str, ModuleRecord]:
        """Return all stored records keyed by module id."""
        def read(tx: StoreTransaction):
            anchor = self.context.anchor(tx)
            return {key: decode_record(str(value)) for key, value in anchor.properties().items()}

        return self._in_tx(read)

    def get_record(self, module_id: str) -> Optional[ModuleRecord]:
        def read(tx: StoreTransaction):
            raw = self.context.anchor(tx).get_property(module_id)
            return None if raw is None else decode_record(str(raw))

        return self._in_tx(read)

    def record_initialization(self, module_id: str, fingerprint: str) -> bool:
        """
        Store the fingerprint a module was initialized with.

        Returns:
            True if the stored value changed, False if it was already current
        """
        encoded = encode_record(Fingerprint(fingerprint))

        def write(tx: StoreTransaction):
            anchor = self.context.anchor(tx)
            if anchor.get_property(module_id) == encoded:
                return False
            anchor.set_property(module_id, encoded)
            return True

        return self._in_tx(write)

    def force_reinitialization(self, module_id: str, timestamp: Optional[int] = None):
        """Mark a module so that it re-initializes on the next start regardless of its fingerprint."""
        if timestamp is None:
            timestamp = int(time.time() * 1000)
        encoded = encode_record(ForcedReinit(timestamp))

        def write(tx: StoreTransaction):
            self.context.anchor(tx).set_property(module_id, encoded)

        self._in_tx(write)
        logger.info("Forced re-initialization of module %s.", module_id)

    def remove_unused_modules(self, present_module_ids: Iterable[str]) -> List[str]:
        """
        Delete records of modules that are not in `present_module_ids`.

        Returns:
            Ids of the removed records
        """
        present = set(present_module_ids)

        def purge(tx: StoreTransaction):
            anchor = self.context.anchor(tx)
            removed = []
            for key in anchor.property_keys():
                if key not in present:
                    logger.info("Removing unused module %s.", key)
                    anchor.remove_property(key)
                    removed.append(key)
            return removed

        return self._in_tx(purge)

    def initialize_modules(self, modules: Sequence[RuntimeModule]) -> Dict[str, LifecycleState]:
        """
        Bring every module up to date, in order, then purge stale records.

        An exception from a module's initialize/reinitialize propagates and
        leaves its record untouched.

        Returns:
            The lifecycle state decided for each module id
        """
        decisions = {}

        for module in modules:
            fingerprint = module.configuration_fingerprint()
            state = decide_lifecycle(self.get_record(module.module_id), fingerprint)
            decisions[module.module_id] = state

            if state == LifecycleState.UP_TO_DATE:
                logger.info("Module %s is up to date, skipping initialization.", module.module_id)
                continue

            if state == LifecycleState.NEVER_RUN:
                logger.info("Module %s has never been run. Initializing...", module.module_id)
                module.initialize(self.context.store)
            else:
                reason = "was forced" if state == LifecycleState.FORCED_REINIT else "configuration changed"
                logger.info("Module %s needs re-initialization (%s). Re-initializing...",
                            module.module_id, reason)
                module.reinitialize(self.context.store)

            self.record_initialization(module.module_id, fingerprint)

        self.remove_unused_modules(m.module_id for m in modules)
        return decisions
