"""
Inclusion strategies: decide whether a graph element is interesting.
"""

from abc import ABC, abstractmethod
from typing import Iterable

from graphruntime.store.base import GraphElement, Node

__all__ = [
    "InclusionStrategy",
    "IncludeAllNodes",
    "IncludeNoNodes",
    "IncludeNodesWithLabel",
]


class InclusionStrategy(ABC):

    @abstractmethod
    def include(self, element: GraphElement) -> bool:
        ...


class IncludeAllNodes(InclusionStrategy):
    """Default strategy."""

    def include(self, element: GraphElement) -> bool:
        return True


class IncludeNoNodes(InclusionStrategy):

    def include(self, element: GraphElement) -> bool:
        return False


class IncludeNodesWithLabel(InclusionStrategy):
    """Include nodes carrying at least one of the given labels."""

    def __init__(self, labels: Iterable[str]):
        self.labels = frozenset(labels)
        if not self.labels:
            raise ValueError("At least one label is required")

    def include(self, element: GraphElement) -> bool:
        return isinstance(element, Node) and not self.labels.isdisjoint(element.labels)

    def __repr__(self):
        return f"IncludeNodesWithLabel({sorted(self.labels)})"
