"""
Bounded-depth graph crawling.

- strategy: which nodes reach the handler
- handler: visit callbacks and TraversalContext
- crawler: the traversal itself
- module: the crawler packaged as a runtime module
"""

from graphruntime.crawler.crawler import DEFAULT_MAX_DEPTH, GraphCrawler, find_start_node
from graphruntime.crawler.handler import (
    CollectingHandler,
    FunctionHandler,
    Handler,
    LoggingHandler,
    TraversalContext,
)
from graphruntime.crawler.module import CrawlerModule
from graphruntime.crawler.strategy import (
    IncludeAllNodes,
    IncludeNodesWithLabel,
    IncludeNoNodes,
    InclusionStrategy,
)

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "CollectingHandler",
    "CrawlerModule",
    "FunctionHandler",
    "GraphCrawler",
    "Handler",
    "IncludeAllNodes",
    "IncludeNoNodes",
    "IncludeNodesWithLabel",
    "InclusionStrategy",
    "LoggingHandler",
    "TraversalContext",
    "find_start_node",
]
