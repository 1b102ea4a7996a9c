"""Pytest configuration and shared fixtures."""

import pytest

from graphruntime.runtime.module import BaseRuntimeModule
from graphruntime.store.memory import InMemoryGraphStore
from graphruntime.utils.neo4j import get_config, get_driver


@pytest.fixture
def store():
    """An empty in-memory graph store."""
    return InMemoryGraphStore()


@pytest.fixture
def build_chain(store):
    """Build a straight chain of named nodes n0-n1-...; returns their ids in order."""
    def build(length: int):
        with store.begin_transaction() as tx:
            nodes = [tx.create_node("Item") for _ in range(length)]
            for index, node in enumerate(nodes):
                node.set_property("name", f"n{index}")
            for left, right in zip(nodes, nodes[1:]):
                tx.create_relationship(left, right, "NEXT")
            return [node.id for node in nodes]
    return build


@pytest.fixture
def neo4j_config():
    """Neo4j configuration for testing."""
    return get_config()


@pytest.fixture
def skip_without_neo4j(neo4j_config):
    """Skip test if Neo4j is not available."""
    try:
        driver = get_driver(neo4j_config)
        driver.verify_connectivity()
        driver.close()
    except Exception:
        pytest.skip("Neo4j not available")


class RecordingModule(BaseRuntimeModule):
    """Module that records lifecycle calls and leaves one Tick node per tick."""

    module_type = "recording"

    def __init__(self, module_id, config=None, fail_tick=False, fail_init=False):
        super().__init__(module_id, config)
        self.fail_tick = fail_tick
        self.fail_init = fail_init
        self.calls = []

    def initialize(self, store):
        self.calls.append("initialize")
        if self.fail_init:
            raise RuntimeError(f"{self.module_id} cannot initialize")

    def reinitialize(self, store):
        self.calls.append("reinitialize")
        if self.fail_init:
            raise RuntimeError(f"{self.module_id} cannot reinitialize")

    def tick(self, tx):
        self.calls.append("tick")
        marker = tx.create_node("Tick")
        marker.set_property("module", self.module_id)
        if self.fail_tick:
            raise RuntimeError(f"{self.module_id} tick failed")

    def shutdown(self):
        self.calls.append("shutdown")


@pytest.fixture
def module_factory():
    """Build RecordingModule instances."""
    return RecordingModule


@pytest.fixture
def ticks(store):
    """Return the module ids of committed Tick nodes."""
    def read():
        with store.begin_transaction() as tx:
            return sorted(n.get_property("module") for n in tx.nodes_with_label("Tick"))
    return read
