"""
Graph store backends.

- base: GraphStore / StoreTransaction interfaces and element handles
- memory: in-process store with copy-on-begin transactions
- neo4j_store: Neo4j driver backed store
"""

from graphruntime.store.base import (
    Direction,
    GraphElement,
    GraphStore,
    Node,
    Relationship,
    StoreTransaction,
    execute_in_transaction,
)
from graphruntime.store.memory import InMemoryGraphStore
from graphruntime.store.neo4j_store import Neo4jGraphStore

__all__ = [
    "Direction",
    "GraphElement",
    "GraphStore",
    "InMemoryGraphStore",
    "Neo4jGraphStore",
    "Node",
    "Relationship",
    "StoreTransaction",
    "execute_in_transaction",
]
