"""Tests for the module registry and lifecycle manager."""

import pytest

from graphruntime.runtime.context import RuntimeContext
from graphruntime.runtime.records import Fingerprint, ForcedReinit, LifecycleState
from graphruntime.runtime.registry import ModuleRegistry


@pytest.fixture
def registry(store):
    return ModuleRegistry(RuntimeContext.create(store))


def anchor_properties(registry):
    store = registry.context.store
    with store.begin_transaction() as tx:
        return registry.context.anchor(tx).properties()


class TestRecordInitialization:
    """Fingerprint writes."""

    def test_writes_encoded_fingerprint(self, registry):
        """Should store the fingerprint under the module id."""
        assert registry.record_initialization("A", "fp1") is True
        assert anchor_properties(registry) == {"A": "CONFIG:fp1"}
        assert registry.get_record("A") == Fingerprint("fp1")

    def test_idempotent(self, registry):
        """A second identical write should not change anything."""
        registry.record_initialization("A", "fp1")
        before = anchor_properties(registry)

        assert registry.record_initialization("A", "fp1") is False
        assert anchor_properties(registry) == before

    def test_overwrites_forced_marker(self, registry):
        """Recording after a forced marker should clear the marker."""
        registry.force_reinitialization("A", timestamp=5)
        registry.record_initialization("A", "fp1")
        assert registry.get_record("A") == Fingerprint("fp1")


class TestForceReinitialization:
    """Forced markers."""

    def test_writes_marker_with_timestamp(self, registry):
        registry.force_reinitialization("A", timestamp=1234)
        assert anchor_properties(registry) == {"A": "FORCE_INIT:1234"}

    def test_defaults_to_current_time(self, registry):
        registry.force_reinitialization("A")
        record = registry.get_record("A")
        assert isinstance(record, ForcedReinit)
        assert record.timestamp > 0


class TestRemoveUnusedModules:
    """Cleanup completeness."""

    def test_removes_only_absent_modules(self, registry):
        """Records {A, B, C} against live {A, C} should lose exactly B."""
        for module_id in ("A", "B", "C"):
            registry.record_initialization(module_id, f"fp-{module_id}")

        removed = registry.remove_unused_modules({"A", "C"})

        assert removed == ["B"]
        assert anchor_properties(registry) == {"A": "CONFIG:fp-A", "C": "CONFIG:fp-C"}

    def test_nothing_to_remove(self, registry):
        registry.record_initialization("A", "fp")
        assert registry.remove_unused_modules(["A"]) == []

    def test_records_listing(self, registry):
        registry.record_initialization("A", "fp")
        registry.force_reinitialization("B", timestamp=7)
        assert registry.records() == {"A": Fingerprint("fp"), "B": ForcedReinit(7)}


class TestInitializeModules:
    """Startup state machine."""

    def test_never_run(self, registry, module_factory):
        """A new module should be initialized and recorded."""
        module = module_factory("A", {"x": 1})
        decisions = registry.initialize_modules([module])

        assert decisions == {"A": LifecycleState.NEVER_RUN}
        assert module.calls == ["initialize"]
        assert registry.get_record("A") == Fingerprint(module.configuration_fingerprint())

    def test_up_to_date(self, registry, module_factory):
        """An unchanged module should not be initialized again."""
        registry.initialize_modules([module_factory("A", {"x": 1})])

        restarted = module_factory("A", {"x": 1})
        decisions = registry.initialize_modules([restarted])

        assert decisions == {"A": LifecycleState.UP_TO_DATE}
        assert restarted.calls == []

    def test_config_changed(self, registry, module_factory):
        """A changed configuration should trigger reinitialize and a new record."""
        registry.initialize_modules([module_factory("A", {"x": 1})])

        changed = module_factory("A", {"x": 2})
        decisions = registry.initialize_modules([changed])

        assert decisions == {"A": LifecycleState.CONFIG_CHANGED}
        assert changed.calls == ["reinitialize"]
        assert registry.get_record("A") == Fingerprint(changed.configuration_fingerprint())

    def test_forced_reinit(self, registry, module_factory):
        """A forced marker should trigger reinitialize even with equal configuration."""
        registry.initialize_modules([module_factory("A", {"x": 1})])
        registry.force_reinitialization("A")

        module = module_factory("A", {"x": 1})
        decisions = registry.initialize_modules([module])

        assert decisions == {"A": LifecycleState.FORCED_REINIT}
        assert module.calls == ["reinitialize"]
        assert registry.get_record("A") == Fingerprint(module.configuration_fingerprint())

    def test_purges_removed_modules(self, registry, module_factory):
        """Modules dropped from the registered set should lose their record."""
        registry.initialize_modules([module_factory("A"), module_factory("B")])
        registry.initialize_modules([module_factory("A")])
        assert set(registry.records()) == {"A"}

    def test_runs_in_registration_order(self, registry, module_factory):
        """Decisions should follow registration order."""
        modules = [module_factory(name) for name in ("C", "A", "B")]
        decisions = registry.initialize_modules(modules)
        assert list(decisions) == ["C", "A", "B"]

    def test_failed_initialization_leaves_record(self, registry, module_factory):
        """A failing initialize should propagate and record nothing."""
        registry.initialize_modules([module_factory("A", {"x": 1})])
        before = registry.get_record("A")

        with pytest.raises(RuntimeError):
            registry.initialize_modules([module_factory("A", {"x": 2}, fail_init=True)])

        assert registry.get_record("A") == before
