"""
Crawler as a runtime module: every tick crawls the graph once.
"""

import logging
from typing import Callable, Optional, Union

from graphruntime.crawler.crawler import DEFAULT_MAX_DEPTH, GraphCrawler
from graphruntime.crawler.handler import Handler, LoggingHandler, TraversalContext
from graphruntime.crawler.strategy import IncludeNodesWithLabel
from graphruntime.runtime.module import BaseRuntimeModule
from graphruntime.store.base import StoreTransaction

__all__ = ["CrawlerModule"]

logger = logging.getLogger(__name__)


class CrawlerModule(BaseRuntimeModule):
    """
    Crawls from an arbitrary node on every tick.

    Settings that take part in the fingerprint: max_depth and the optional
    label restricting which nodes reach the handler.
    """

    module_type = "crawler"

    def __init__(
        self,
        module_id: str,
        max_depth: int = DEFAULT_MAX_DEPTH,
        label: Optional[str] = None,
        handler: Union[Handler, Callable[[TraversalContext], None], None] = None,
    ):
        config = {"max_depth": max_depth}
        if label:
            config["label"] = label
        super().__init__(module_id, config)

        strategy = IncludeNodesWithLabel([label]) if label else None
        self.crawler = GraphCrawler(
            handler if handler is not None else LoggingHandler(),
            node_inclusion_strategy=strategy,
            max_depth=max_depth,
        )
        self.last_visited = 0

    def tick(self, tx: StoreTransaction):
        self.last_visited = self.crawler.crawl_from_arbitrary_node(tx)
        logger.debug("Module %s crawled %d node(s)", self.module_id, self.last_visited)
