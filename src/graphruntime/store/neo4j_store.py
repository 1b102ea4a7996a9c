"""
Neo4j-backed graph store.

Every StoreTransaction maps onto one explicit Neo4j transaction on its own
session. Elements are addressed by their elementId().

Usage:
    store = Neo4jGraphStore()
    with store.begin_transaction() as tx:
        for node in tx.all_nodes():
            print(node.id, node.labels)
"""

from typing import Any, Dict, List, Optional

from neo4j.exceptions import DriverError, Neo4jError, ServiceUnavailable, SessionExpired

from graphruntime.errors import StoreError, StoreUnavailable
from graphruntime.store.base import (
    Direction,
    GraphElement,
    GraphStore,
    Node,
    Relationship,
    StoreTransaction,
)
from graphruntime.utils.neo4j import get_config, get_driver, get_session

__all__ = ["Neo4jGraphStore", "Neo4jTransaction", "quote_identifier"]

_UNREACHABLE = (ServiceUnavailable, SessionExpired)

_RELATIONSHIP_PATTERNS = {
    Direction.OUTGOING: "(n)-[r]->()",
    Direction.INCOMING: "(n)<-[r]-()",
    Direction.BOTH: "(n)-[r]-()",
}


def quote_identifier(name: str) -> str:
    """Backtick-quote a label or relationship type for use in Cypher."""
    return "`" + name.replace("`", "``") + "`"


class Neo4jTransaction(StoreTransaction):

    def __init__(self, session, tx):
        super().__init__()
        self._session = session
        self._tx = tx

    def _run(self, query: str, **params) -> list:
        if self.closed:
            raise StoreError("Transaction is already closed")
        try:
            return list(self._tx.run(query, **params))
        except _UNREACHABLE as e:
            raise StoreUnavailable(str(e)) from e
        except (Neo4jError, DriverError) as e:
            raise StoreError(str(e)) from e

    def _finish(self, action):
        if self.closed:
            raise StoreError("Transaction is already closed")
        try:
            action()
        except _UNREACHABLE as e:
            raise StoreUnavailable(str(e)) from e
        except (Neo4jError, DriverError) as e:
            raise StoreError(str(e)) from e
        finally:
            self.closed = True
            self._session.close()

    def commit(self):
        self._finish(self._tx.commit)

    def rollback(self):
        self._finish(self._tx.rollback)

    def _node(self, record, id_key: str = "id", labels_key: str = "labels") -> Node:
        return Node(self, record[id_key], record[labels_key])

    def all_nodes(self) -> List[Node]:
        records = self._run("MATCH (n) RETURN elementId(n) AS id, labels(n) AS labels")
        return [self._node(r) for r in records]

    def nodes_with_label(self, label: str) -> List[Node]:
        records = self._run(
            f"MATCH (n:{quote_identifier(label)}) RETURN elementId(n) AS id, labels(n) AS labels"
        )
        return [self._node(r) for r in records]

    def first_node(self, exclude_label: Optional[str] = None) -> Optional[Node]:
        where = f"WHERE NOT n:{quote_identifier(exclude_label)} " if exclude_label else ""
        records = self._run(
            f"MATCH (n) {where}RETURN elementId(n) AS id, labels(n) AS labels LIMIT 1"
        )
        if not records:
            return None
        return self._node(records[0])

    def get_node(self, node_id: Any) -> Optional[Node]:
        records = self._run("""
            MATCH (n) WHERE elementId(n) = $id
            RETURN elementId(n) AS id, labels(n) AS labels
        """, id=node_id)
        if not records:
            return None
        return self._node(records[0])

    def create_node(self, *labels: str) -> Node:
        label_clause = "".join(":" + quote_identifier(label) for label in labels)
        records = self._run(
            f"CREATE (n{label_clause}) RETURN elementId(n) AS id, labels(n) AS labels"
        )
        return self._node(records[0])

    def create_relationship(self, start: Node, end: Node, rel_type: str,
                            properties: Optional[Dict[str, Any]] = None) -> Relationship:
        records = self._run(f"""
            MATCH (a), (b) WHERE elementId(a) = $start AND elementId(b) = $end
            CREATE (a)-[r:{quote_identifier(rel_type)}]->(b)
            SET r = $props
            RETURN elementId(r) AS id
        """, start=start.id, end=end.id, props=dict(properties or {}))
        if not records:
            raise StoreError(f"Cannot create relationship: {start.id!r} or {end.id!r} does not exist")
        return Relationship(self, records[0]["id"], rel_type, start, end)

    def _match(self, element: GraphElement) -> str:
        if isinstance(element, Relationship):
            return "MATCH ()-[e]->() WHERE elementId(e) = $id"
        return "MATCH (e) WHERE elementId(e) = $id"

    def _properties(self, element: GraphElement) -> Dict[str, Any]:
        records = self._run(self._match(element) + " RETURN properties(e) AS props", id=element.id)
        if not records:
            raise StoreError(f"{type(element).__name__} {element.id!r} does not exist")
        return dict(records[0]["props"])

    def _set_property(self, element: GraphElement, key: str, value: Any):
        self._run(self._match(element) + " SET e += $props", id=element.id, props={key: value})

    def _remove_property(self, element: GraphElement, key: str):
        # Setting a key to null through a map update removes the property
        self._run(self._match(element) + " SET e += $props", id=element.id, props={key: None})

    def _relationships(self, node: Node, direction: Direction) -> List[Relationship]:
        records = self._run(f"""
            MATCH {_RELATIONSHIP_PATTERNS[direction]} WHERE elementId(n) = $id
            WITH DISTINCT r
            RETURN elementId(r) AS id, type(r) AS type,
                   elementId(startNode(r)) AS start_id, labels(startNode(r)) AS start_labels,
                   elementId(endNode(r)) AS end_id, labels(endNode(r)) AS end_labels
            ORDER BY id
        """, id=node.id)
        return [
            Relationship(
                self, r["id"], r["type"],
                self._node(r, "start_id", "start_labels"),
                self._node(r, "end_id", "end_labels"),
            )
            for r in records
        ]


class Neo4jGraphStore(GraphStore):
    """
    GraphStore on top of the official Neo4j driver.

    Args:
        driver: Existing driver (created from NEO4J_* env vars if not provided)
        database: Database name (uses NEO4J_DATABASE env var if not provided)
    """

    def __init__(self, driver=None, database: Optional[str] = None):
        self.driver = driver or get_driver()
        self.database = database or get_config()["database"]

    def is_available(self, timeout_ms: int = 0) -> bool:
        """
        Check connectivity with verify_connectivity().

        `timeout_ms` is not used: the driver bounds the check with the
        connection_timeout it was created with (NEO4J_CONNECTION_TIMEOUT).
        """
        try:
            self.driver.verify_connectivity()
            return True
        except (Neo4jError, DriverError):
            return False

    def begin_transaction(self) -> Neo4jTransaction:
        session = get_session(self.driver, self.database)
        try:
            tx = session.begin_transaction()
        except _UNREACHABLE as e:
            session.close()
            raise StoreUnavailable(str(e)) from e
        except (Neo4jError, DriverError) as e:
            session.close()
            raise StoreError(str(e)) from e
        return Neo4jTransaction(session, tx)

    def close(self):
        self.driver.close()
