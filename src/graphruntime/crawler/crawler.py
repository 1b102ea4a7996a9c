"""
Depth-bounded graph crawler.

Starting from one node, the crawler follows every incident relationship
except the one it just arrived on, down to a maximum depth. There is no
global visited set: a node reachable through several paths is visited once
per path, and the depth bound is what ends the walk on cyclic graphs.

The walk uses an explicit work stack and visits nodes in the same order a
recursive depth-first walk would.
"""

import logging
from typing import Callable, Optional, Union

from graphruntime.crawler.handler import Handler, TraversalContext, as_handler
from graphruntime.crawler.strategy import IncludeAllNodes, InclusionStrategy
from graphruntime.errors import StoreError, TraversalError
from graphruntime.runtime.context import ANCHOR_LABEL
from graphruntime.store.base import Direction, GraphStore, Node, StoreTransaction

__all__ = ["DEFAULT_MAX_DEPTH", "GraphCrawler", "find_start_node"]

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 9


def find_start_node(tx: StoreTransaction) -> Optional[Node]:
    """Pick an arbitrary start node: the first node that is not the runtime anchor."""
    return tx.first_node(exclude_label=ANCHOR_LABEL)


def _debug(message: str, depth: int):
    logger.debug("%s %s", "*" * depth, message)


class GraphCrawler:
    """
    Args:
        handler: Called for every visited node the inclusion strategy accepts
        node_inclusion_strategy: Filters handler calls (includes everything if None)
        max_depth: Default depth bound for crawl()
    """

    def __init__(
        self,
        handler: Union[Handler, Callable[[TraversalContext], None]],
        node_inclusion_strategy: Optional[InclusionStrategy] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.handler = as_handler(handler)
        self.node_inclusion_strategy = node_inclusion_strategy or IncludeAllNodes()
        self.max_depth = max_depth

    def crawl(
        self,
        start: Node,
        max_depth: Optional[int] = None,
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> int:
        """
        Walk the graph from `start`.

        Args:
            start: Node at depth 0
            max_depth: Deepest level visited (uses self.max_depth if None)
            should_stop: Polled before each node; the walk ends when it returns True

        Returns:
            Number of nodes visited, included or not

        Raises:
            TraversalError: If the store fails mid-walk
        """
        if max_depth is None:
            max_depth = self.max_depth

        stack = [(start, 0, None)]
        visited = 0
        debug = logger.isEnabledFor(logging.DEBUG)

        try:
            while stack:
                if should_stop is not None and should_stop():
                    logger.info("Crawl from node %s cancelled after %d node(s)", start.id, visited)
                    break

                node, depth, arrival = stack.pop()
                if depth > max_depth:
                    continue

                relationships = node.relationships(Direction.BOTH)
                if debug:
                    _debug(f"Visiting node: {node.get_property('name', node.id)} "
                           f"with {len(relationships)} relationships", depth)

                visited += 1
                if self.node_inclusion_strategy.include(node):
                    self.handler.on_visit(TraversalContext(node, arrival, depth))

                if depth == max_depth:
                    continue

                children = []
                for relationship in relationships:
                    if relationship != arrival:
                        if debug:
                            _debug(f"Following relationship: {relationship.type}", depth)
                        children.append((relationship.other_node(node), depth + 1, relationship))

                # Reversed so the first relationship is popped (and walked) first
                stack.extend(reversed(children))

        except StoreError as e:
            raise TraversalError(f"Crawl from node {start.id!r} aborted: {e}") from e

        return visited

    def crawl_from_arbitrary_node(self, tx: StoreTransaction, max_depth: Optional[int] = None) -> int:
        """Crawl from the first non-anchor node of the store; returns 0 on an empty store."""
        try:
            start = find_start_node(tx)
        except StoreError as e:
            raise TraversalError(f"Cannot pick a start node: {e}") from e

        if start is None:
            logger.info("Store has no nodes to crawl")
            return 0
        return self.crawl(start, max_depth)

    def start_crawling(self, store: GraphStore, max_depth: Optional[int] = None) -> int:
        """Run one crawl in its own transaction."""
        with store.begin_transaction() as tx:
            return self.crawl_from_arbitrary_node(tx, max_depth)
