"""
Visit handlers and the context they receive.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from graphruntime.store.base import Node, Relationship

__all__ = [
    "TraversalContext",
    "Handler",
    "FunctionHandler",
    "LoggingHandler",
    "CollectingHandler",
    "as_handler",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TraversalContext:
    """The node being visited and the relationship followed to reach it (None at the start node)."""
    element: Node
    arrival_relationship: Optional[Relationship] = None
    depth: int = 0


class Handler(ABC):

    @abstractmethod
    def on_visit(self, context: TraversalContext):
        ...


class FunctionHandler(Handler):
    """Adapts a plain callable taking a TraversalContext."""

    def __init__(self, function: Callable[[TraversalContext], None]):
        self.function = function

    def on_visit(self, context: TraversalContext):
        self.function(context)


class LoggingHandler(Handler):
    """Logs every visited node, optionally showing one of its properties."""

    def __init__(self, name_property: str = "name", level: int = logging.INFO):
        self.name_property = name_property
        self.level = level

    def on_visit(self, context: TraversalContext):
        node = context.element
        via = context.arrival_relationship.type if context.arrival_relationship else "-"
        logger.log(self.level, "Visited node %s (%s) at depth %d via %s",
                   node.id, node.get_property(self.name_property, "?"), context.depth, via)


class CollectingHandler(Handler):
    """Keeps every context it receives, in visit order."""

    def __init__(self):
        self.visits: List[TraversalContext] = []

    def on_visit(self, context: TraversalContext):
        self.visits.append(context)

    @property
    def nodes(self) -> List[Node]:
        return [visit.element for visit in self.visits]


def as_handler(handler: Union[Handler, Callable[[TraversalContext], None]]) -> Handler:
    if isinstance(handler, Handler):
        return handler
    if callable(handler):
        return FunctionHandler(handler)
    raise TypeError(f"Expected a Handler or a callable, got {type(handler).__name__}")
