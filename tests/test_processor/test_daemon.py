"""Tests for the runtime daemon and record administration."""

import pytest

from graphruntime.processor import admin, daemon
from graphruntime.processor.daemon import RuntimeDaemon, get_stats
from graphruntime.runtime.records import LifecycleState


@pytest.fixture
def make_daemon(store):
    def make(modules, **kwargs):
        return RuntimeDaemon(store, modules, delay_ms=0, initial_delay_ms=0, poll_interval=0.01, **kwargs)
    return make


class TestRuntimeDaemon:
    """Tests for RuntimeDaemon."""

    def test_single_cycle(self, make_daemon, module_factory, ticks):
        module = module_factory("A")
        daemon = make_daemon([module])

        assert daemon.run(max_cycles=1) == 1
        assert module.calls == ["initialize", "tick", "shutdown"]
        assert ticks() == ["A"]

    def test_force_init(self, make_daemon, module_factory):
        make_daemon([module_factory("A")]).run(max_cycles=1)

        daemon = make_daemon([module_factory("A")], force_init=["A"])
        daemon.run(max_cycles=1)
        assert daemon.runtime.lifecycle == {"A": LifecycleState.FORCED_REINIT}

    def test_force_init_unknown_module(self, make_daemon, module_factory):
        with pytest.raises(ValueError):
            make_daemon([module_factory("A")], force_init=["B"])

    def test_timing_from_arguments(self, make_daemon, module_factory):
        daemon = make_daemon([module_factory("A")])
        assert daemon.timing_strategy.delay == 0
        assert daemon.timing_strategy.initial_delay == 0


class TestStatsAndAdmin:
    """Record inspection and editing."""

    def test_get_stats(self, store, make_daemon, module_factory):
        module = module_factory("A")
        make_daemon([module]).run(max_cycles=1)

        stats = get_stats(store)
        assert stats == {"modules": {"A": {
            "state": "initialized",
            "fingerprint": module.configuration_fingerprint(),
        }}}

    def test_force_reinit_and_list(self, store, make_daemon, module_factory):
        make_daemon([module_factory("A")]).run(max_cycles=1)

        admin.force_reinit(store, "A")
        lines = admin.list_records(store)
        assert len(lines) == 1
        assert lines[0].startswith("A\tforced re-initialization")
        assert get_stats(store)["modules"]["A"]["state"] == "forced_reinit"

    def test_prune(self, store, make_daemon, module_factory):
        make_daemon([module_factory("A"), module_factory("B")]).run(max_cycles=1)

        assert admin.prune(store, ["A"]) == ["B"]
        assert [line.split("\t")[0] for line in admin.list_records(store)] == ["A"]

    def test_list_empty(self, store):
        assert admin.list_records(store) == []


class TestDaemonMain:
    """Exit behaviour of the daemon entry point."""

    @pytest.fixture
    def run_main(self, store, monkeypatch):
        monkeypatch.setattr(daemon, "open_store", lambda database=None: store)

        def run(*argv):
            monkeypatch.setattr("sys.argv", ["graphruntime-daemon", *argv])
            with pytest.raises(SystemExit) as exc_info:
                daemon.main()
            return exc_info.value.code
        return run

    def test_unreachable_store_exits_cleanly(self, store, run_main):
        """A store error should end in exit code 1, not a traceback."""
        store.available = False
        assert run_main("--stats") == 1

    def test_bad_modules_file_exits_cleanly(self, tmp_path, run_main, capsys):
        path = tmp_path / "modules.yaml"
        path.write_text("- id: a\n  max_depth:\n")
        assert run_main("--modules", str(path)) == 1
        assert "Error:" in capsys.readouterr().err
