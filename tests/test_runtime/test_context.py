"""Tests for anchor node lookup and the runtime context."""

import pytest

from graphruntime.errors import CorruptRuntimeState
from graphruntime.runtime.context import ANCHOR_LABEL, RuntimeContext, get_or_create_anchor


def count_anchors(store):
    with store.begin_transaction() as tx:
        return len(tx.nodes_with_label(ANCHOR_LABEL))


class TestGetOrCreateAnchor:
    """Anchor uniqueness."""

    def test_creates_when_missing(self, store):
        """An empty store should get exactly one anchor."""
        with store.begin_transaction() as tx:
            anchor = get_or_create_anchor(tx)
            assert anchor.has_label(ANCHOR_LABEL)
        assert count_anchors(store) == 1

    def test_returns_existing(self, store):
        """An existing anchor should be returned unchanged."""
        with store.begin_transaction() as tx:
            existing = tx.create_node(ANCHOR_LABEL)
            existing.set_property("m", "CONFIG:x")

        with store.begin_transaction() as tx:
            anchor = get_or_create_anchor(tx)
            assert anchor == existing
            assert anchor.properties() == {"m": "CONFIG:x"}
        assert count_anchors(store) == 1

    def test_multiple_anchors_fatal(self, store):
        """Two anchors should raise CorruptRuntimeState."""
        with store.begin_transaction() as tx:
            tx.create_node(ANCHOR_LABEL)
            tx.create_node(ANCHOR_LABEL)

        with store.begin_transaction() as tx:
            with pytest.raises(CorruptRuntimeState):
                get_or_create_anchor(tx)


class TestRuntimeContext:
    """Tests for RuntimeContext."""

    def test_create_is_idempotent(self, store):
        """Creating the context twice should reuse the same anchor."""
        first = RuntimeContext.create(store)
        second = RuntimeContext.create(store)
        assert first.anchor_id == second.anchor_id
        assert count_anchors(store) == 1

    def test_anchor_resolved_in_transaction(self, store):
        """anchor() should resolve the cached id in a new transaction."""
        context = RuntimeContext.create(store)
        with store.begin_transaction() as tx:
            assert context.anchor(tx).id == context.anchor_id

    def test_vanished_anchor(self, store):
        """A deleted anchor should be reported as corrupt state."""
        context = RuntimeContext.create(store)
        with store.begin_transaction() as tx:
            tx.delete_node(tx.get_node(context.anchor_id))

        with store.begin_transaction() as tx:
            with pytest.raises(CorruptRuntimeState):
                context.anchor(tx)

    def test_refuses_corrupt_store(self, store):
        """Context creation should fail on a store with two anchors."""
        with store.begin_transaction() as tx:
            tx.create_node(ANCHOR_LABEL)
            tx.create_node(ANCHOR_LABEL)
        with pytest.raises(CorruptRuntimeState):
            RuntimeContext.create(store)
