"""
In-process graph store.

Each transaction works on a private deep copy of the graph and swaps it in
on commit, so a rolled back transaction leaves no trace. Intended for tests
and for embedding the runtime without a database server.
"""

import copy
import threading
from typing import Any, Dict, List, Optional

from graphruntime.errors import StoreError, StoreUnavailable
from graphruntime.store.base import (
    Direction,
    GraphElement,
    GraphStore,
    Node,
    Relationship,
    StoreTransaction,
)

__all__ = ["InMemoryGraphStore", "MemoryTransaction"]


class _GraphState:
    def __init__(self):
        # node id -> {"labels": set, "props": dict, "rels": [rel ids]}
        self.nodes: Dict[int, dict] = {}
        # rel id -> {"type": str, "start": node id, "end": node id, "props": dict}
        self.relationships: Dict[int, dict] = {}
        self.next_id = 0

    def allocate_id(self) -> int:
        element_id = self.next_id
        self.next_id += 1
        return element_id


class MemoryTransaction(StoreTransaction):

    def __init__(self, store: "InMemoryGraphStore", state: _GraphState):
        super().__init__()
        self._store = store
        self._state = state

    def _check_open(self):
        if self.closed:
            raise StoreError("Transaction is already closed")

    def commit(self):
        self._check_open()
        self._store._swap_in(self._state)
        self.closed = True

    def rollback(self):
        self._check_open()
        self._state = None
        self.closed = True

    def _node(self, node_id: int) -> Node:
        return Node(self, node_id, self._state.nodes[node_id]["labels"])

    def _relationship(self, rel_id: int) -> Relationship:
        data = self._state.relationships[rel_id]
        return Relationship(self, rel_id, data["type"],
                            self._node(data["start"]), self._node(data["end"]))

    def all_nodes(self) -> List[Node]:
        self._check_open()
        return [self._node(node_id) for node_id in self._state.nodes]

    def first_node(self, exclude_label: Optional[str] = None) -> Optional[Node]:
        self._check_open()
        for node_id, data in self._state.nodes.items():
            if exclude_label is None or exclude_label not in data["labels"]:
                return self._node(node_id)
        return None

    def get_node(self, node_id: Any) -> Optional[Node]:
        self._check_open()
        if node_id not in self._state.nodes:
            return None
        return self._node(node_id)

    def create_node(self, *labels: str) -> Node:
        self._check_open()
        node_id = self._state.allocate_id()
        self._state.nodes[node_id] = {"labels": set(labels), "props": {}, "rels": []}
        return self._node(node_id)

    def create_relationship(self, start: Node, end: Node, rel_type: str,
                            properties: Optional[Dict[str, Any]] = None) -> Relationship:
        self._check_open()
        for node in (start, end):
            if node.id not in self._state.nodes:
                raise StoreError(f"Node {node.id!r} does not exist")

        rel_id = self._state.allocate_id()
        self._state.relationships[rel_id] = {
            "type": rel_type,
            "start": start.id,
            "end": end.id,
            "props": dict(properties or {}),
        }
        self._state.nodes[start.id]["rels"].append(rel_id)
        if end.id != start.id:
            self._state.nodes[end.id]["rels"].append(rel_id)
        return self._relationship(rel_id)

    def delete_node(self, node: Node):
        """Delete a node. Fails while it still has relationships."""
        self._check_open()
        data = self._state.nodes.get(node.id)
        if data is None:
            raise StoreError(f"Node {node.id!r} does not exist")
        if data["rels"]:
            raise StoreError(f"Node {node.id!r} still has relationships")
        del self._state.nodes[node.id]

    def _record(self, element: GraphElement) -> dict:
        self._check_open()
        table = self._state.relationships if isinstance(element, Relationship) else self._state.nodes
        record = table.get(element.id)
        if record is None:
            raise StoreError(f"{type(element).__name__} {element.id!r} does not exist")
        return record

    def _properties(self, element: GraphElement) -> Dict[str, Any]:
        return self._record(element)["props"]

    def _set_property(self, element: GraphElement, key: str, value: Any):
        self._record(element)["props"][key] = value

    def _remove_property(self, element: GraphElement, key: str):
        self._record(element)["props"].pop(key, None)

    def _relationships(self, node: Node, direction: Direction) -> List[Relationship]:
        rels = []
        for rel_id in self._record(node)["rels"]:
            data = self._state.relationships[rel_id]
            if direction == Direction.OUTGOING and data["start"] != node.id:
                continue
            if direction == Direction.INCOMING and data["end"] != node.id:
                continue
            rels.append(self._relationship(rel_id))
        return rels


class InMemoryGraphStore(GraphStore):
    """
    Graph store held in memory.

    Set `available` to False to simulate an unreachable database: the store
    then reports itself unavailable and refuses to open transactions.
    """

    def __init__(self):
        self._state = _GraphState()
        self._lock = threading.Lock()
        self.available = True

    def is_available(self, timeout_ms: int = 0) -> bool:
        return self.available

    def begin_transaction(self) -> MemoryTransaction:
        if not self.available:
            raise StoreUnavailable("In-memory store is marked unavailable")
        with self._lock:
            snapshot = copy.deepcopy(self._state)
        return MemoryTransaction(self, snapshot)

    def _swap_in(self, state: _GraphState):
        with self._lock:
            self._state = state
