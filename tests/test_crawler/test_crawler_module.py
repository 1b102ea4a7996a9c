"""Tests for the crawler runtime module."""

import pytest

from graphruntime.crawler.handler import CollectingHandler
from graphruntime.crawler.module import CrawlerModule
from graphruntime.runtime.context import ANCHOR_LABEL


class TestCrawlerModule:
    """Tests for CrawlerModule."""

    def test_tick_crawls_from_first_node(self, store, build_chain):
        """A tick should crawl from the first non-anchor node."""
        with store.begin_transaction() as tx:
            tx.create_node(ANCHOR_LABEL)
        build_chain(6)

        handler = CollectingHandler()
        module = CrawlerModule("crawler", max_depth=2, handler=handler)
        with store.begin_transaction() as tx:
            module.tick(tx)

        assert module.last_visited == 3
        assert [n.get_property("name") for n in handler.nodes] == ["n0", "n1", "n2"]

    def test_tick_on_empty_store(self, store):
        module = CrawlerModule("crawler", handler=CollectingHandler())
        with store.begin_transaction() as tx:
            module.tick(tx)
        assert module.last_visited == 0

    def test_label_filter(self, store):
        """The label setting should restrict handler calls."""
        with store.begin_transaction() as tx:
            a, b = tx.create_node("Person"), tx.create_node("Place")
            tx.create_relationship(a, b, "LIVES_IN")

        handler = CollectingHandler()
        module = CrawlerModule("people", label="Person", handler=handler)
        with store.begin_transaction() as tx:
            module.tick(tx)
        assert [n.labels for n in handler.nodes] == [frozenset({"Person"})]

    def test_fingerprint_reflects_settings(self):
        """max_depth and label changes should change the fingerprint."""
        base = CrawlerModule("c", max_depth=9).configuration_fingerprint()
        assert CrawlerModule("c", max_depth=9).configuration_fingerprint() == base
        assert CrawlerModule("c", max_depth=3).configuration_fingerprint() != base
        assert CrawlerModule("c", max_depth=9, label="X").configuration_fingerprint() != base

    def test_default_handler_logs(self, store, build_chain, caplog):
        """Without a handler, visits should be logged."""
        build_chain(2)
        module = CrawlerModule("crawler")
        with caplog.at_level("INFO", logger="graphruntime.crawler.handler"):
            with store.begin_transaction() as tx:
                module.tick(tx)
        assert "Visited node" in caplog.text
