"""
Graph store abstraction.

A GraphStore hands out StoreTransactions. Nodes and relationships are thin
handles bound to the transaction that produced them; every property read or
write goes through that transaction, so backends only implement a handful of
primitives.

Usage:
    with store.begin_transaction() as tx:
        node = tx.create_node("Person")
        node.set_property("name", "Alice")
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

__all__ = [
    "Direction",
    "GraphElement",
    "Node",
    "Relationship",
    "StoreTransaction",
    "GraphStore",
    "execute_in_transaction",
]


class Direction(Enum):
    OUTGOING = "outgoing"
    INCOMING = "incoming"
    BOTH = "both"


class GraphElement:
    """Common handle behaviour for nodes and relationships."""

    def __init__(self, tx: "StoreTransaction", element_id: Any):
        self._tx = tx
        self.id = element_id

    def get_property(self, key: str, default: Any = None) -> Any:
        return self._tx._properties(self).get(key, default)

    def has_property(self, key: str) -> bool:
        return key in self._tx._properties(self)

    def set_property(self, key: str, value: Any):
        self._tx._set_property(self, key, value)

    def remove_property(self, key: str):
        self._tx._remove_property(self, key)

    def properties(self) -> Dict[str, Any]:
        return dict(self._tx._properties(self))

    def property_keys(self) -> List[str]:
        return list(self._tx._properties(self).keys())

    def __eq__(self, other):
        return type(self) is type(other) and self.id == other.id

    def __hash__(self):
        return hash((type(self).__name__, self.id))


class Node(GraphElement):
    """A node handle. Labels are read once when the handle is created."""

    def __init__(self, tx: "StoreTransaction", element_id: Any, labels: Iterable[str] = ()):
        super().__init__(tx, element_id)
        self.labels = frozenset(labels)

    def has_label(self, label: str) -> bool:
        return label in self.labels

    def relationships(self, direction: Direction = Direction.BOTH) -> List["Relationship"]:
        return self._tx._relationships(self, direction)

    def degree(self, direction: Direction = Direction.BOTH) -> int:
        return len(self.relationships(direction))

    def __repr__(self):
        return f"Node({self.id!r}, labels={sorted(self.labels)})"


class Relationship(GraphElement):
    """A relationship handle. Endpoints and type are fixed at creation."""

    def __init__(self, tx: "StoreTransaction", element_id: Any, rel_type: str,
                 start_node: Node, end_node: Node):
        super().__init__(tx, element_id)
        self.type = rel_type
        self.start_node = start_node
        self.end_node = end_node

    def other_node(self, node: Node) -> Node:
        """Return the endpoint that is not `node` (for self-loops, `node` itself)."""
        if node == self.start_node:
            return self.end_node
        if node == self.end_node:
            return self.start_node
        raise ValueError(f"{node!r} is not an endpoint of relationship {self.id!r}")

    def __repr__(self):
        return f"Relationship({self.id!r}, {self.type}, {self.start_node.id!r}->{self.end_node.id!r})"


class StoreTransaction(ABC):
    """
    One unit of atomic work against a store.

    Used as a context manager the transaction commits on a clean exit and
    rolls back when the block raises. Once committed or rolled back it is
    closed and must not be used again.
    """

    def __init__(self):
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.closed:
            return False
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
        return False

    @abstractmethod
    def commit(self):
        ...

    @abstractmethod
    def rollback(self):
        ...

    @abstractmethod
    def all_nodes(self) -> List[Node]:
        ...

    def nodes_with_label(self, label: str) -> List[Node]:
        return [node for node in self.all_nodes() if node.has_label(label)]

    @abstractmethod
    def first_node(self, exclude_label: Optional[str] = None) -> Optional[Node]:
        """Return one node not carrying `exclude_label`, or None. Does not read the whole graph."""

    @abstractmethod
    def get_node(self, node_id: Any) -> Optional[Node]:
        ...

    @abstractmethod
    def create_node(self, *labels: str) -> Node:
        ...

    @abstractmethod
    def create_relationship(self, start: Node, end: Node, rel_type: str,
                            properties: Optional[Dict[str, Any]] = None) -> Relationship:
        ...

    # Primitives used by element handles

    @abstractmethod
    def _properties(self, element: GraphElement) -> Dict[str, Any]:
        ...

    @abstractmethod
    def _set_property(self, element: GraphElement, key: str, value: Any):
        ...

    @abstractmethod
    def _remove_property(self, element: GraphElement, key: str):
        ...

    @abstractmethod
    def _relationships(self, node: Node, direction: Direction) -> List[Relationship]:
        ...


class GraphStore(ABC):
    """A transactional node-and-relationship store."""

    @abstractmethod
    def is_available(self, timeout_ms: int = 0) -> bool:
        """Report whether the store can be reached. Backends may ignore `timeout_ms`."""

    @abstractmethod
    def begin_transaction(self) -> StoreTransaction:
        """Open a transaction. Raises StoreUnavailable when the store cannot be reached."""

    def close(self):
        pass


def execute_in_transaction(store: GraphStore, callback: Callable[[StoreTransaction], Any]) -> Any:
    """Run `callback(tx)` in a fresh transaction and return its result."""
    with store.begin_transaction() as tx:
        return callback(tx)
