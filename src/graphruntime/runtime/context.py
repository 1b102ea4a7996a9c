"""
Runtime context: the store plus the anchor node bookkeeping.

The anchor is a single node carrying ANCHOR_LABEL, used as a key-value bag
for per-module records. It is looked up (or created) once when the context
is built; afterwards components resolve it by id inside their own
transactions.
"""

import logging
from dataclasses import dataclass
from typing import Any

from graphruntime.errors import CorruptRuntimeState
from graphruntime.store.base import GraphStore, Node, StoreTransaction, execute_in_transaction

__all__ = ["ANCHOR_LABEL", "RuntimeContext", "get_or_create_anchor"]

logger = logging.getLogger(__name__)

ANCHOR_LABEL = "GraphRuntimeAnchor"


def get_or_create_anchor(tx: StoreTransaction) -> Node:
    """
    Return the anchor node, creating it on first use.

    Raises:
        CorruptRuntimeState: If more than one anchor node exists
    """
    anchors = tx.nodes_with_label(ANCHOR_LABEL)

    if not anchors:
        logger.info("Graph runtime has never been run on this store. Creating anchor node...")
        return tx.create_node(ANCHOR_LABEL)

    if len(anchors) > 1:
        message = (
            f"There is more than 1 runtime anchor node ({len(anchors)} found)! "
            "Cannot start graph runtime."
        )
        logger.critical(message)
        raise CorruptRuntimeState(message)

    return anchors[0]


@dataclass
class RuntimeContext:
    store: GraphStore
    anchor_id: Any

    @classmethod
    def create(cls, store: GraphStore) -> "RuntimeContext":
        """Locate or create the anchor in its own transaction."""
        anchor = execute_in_transaction(store, get_or_create_anchor)
        return cls(store=store, anchor_id=anchor.id)

    def anchor(self, tx: StoreTransaction) -> Node:
        node = tx.get_node(self.anchor_id)
        if node is None:
            raise CorruptRuntimeState(f"Runtime anchor node {self.anchor_id!r} no longer exists")
        return node
