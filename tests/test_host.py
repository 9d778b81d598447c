"""
Tests for HostRuntime: convar registry, map lifecycle and event delivery.
"""

import logging

import pytest

from core.host import MAP_START, PLUGIN_START, ConVar, HostRuntime, HostStateError


class TestConVar:

    def test_set_value_stores_string(self):
        convar = ConVar("sv_workshop_id")
        convar.set_value(1480550740)
        assert convar.value == "1480550740"


class TestConVars:

    def test_register_and_find(self):
        host = HostRuntime()
        convar = host.register_convar("sv_workshop_id", default="0", description="id")
        assert host.find_convar("sv_workshop_id") is convar
        assert convar.value == "0"

    def test_register_is_idempotent(self):
        host = HostRuntime()
        first = host.register_convar("sv_workshop_id")
        assert host.register_convar("sv_workshop_id", default="5") is first

    def test_find_missing(self):
        assert HostRuntime().find_convar("nope") is None

    def test_convar_names_sorted(self):
        host = HostRuntime()
        host.register_convar("b")
        host.register_convar("a")
        assert host.convar_names() == ["a", "b"]


class TestLifecycle:

    def test_start_emits_plugin_start_once(self):
        host = HostRuntime()
        calls = []
        host.add_listener(PLUGIN_START, lambda: calls.append("start"))
        host.start()
        assert calls == ["start"]
        with pytest.raises(HostStateError):
            host.start()

    def test_change_level_before_start(self):
        with pytest.raises(HostStateError):
            HostRuntime().change_level("testmap")

    def test_change_level_emits_map_start(self):
        host = HostRuntime()
        seen = []
        host.add_listener(MAP_START, lambda: seen.append(host.current_map()))
        host.start()
        host.change_level("testmap")
        host.change_level("testmap2")
        assert seen == ["testmap", "testmap2"]

    def test_empty_map_name_rejected(self):
        host = HostRuntime()
        host.start()
        with pytest.raises(ValueError):
            host.change_level("  ")

    def test_current_map_truncated(self):
        host = HostRuntime(max_map_name_length=8)
        host.start()
        host.change_level("a_very_long_map_name")
        assert host.current_map() == "a_very_l"

    def test_no_map_before_first_load(self):
        assert HostRuntime().current_map() is None

    def test_unknown_event(self):
        with pytest.raises(ValueError):
            HostRuntime().add_listener("round_start", lambda: None)


class TestListenerFailures:

    def test_plugin_start_failure_propagates(self):
        host = HostRuntime()

        def boom():
            raise RuntimeError("fatal")

        host.add_listener(PLUGIN_START, boom)
        with pytest.raises(RuntimeError):
            host.start()
        assert host.started is False

    def test_map_start_failure_is_logged_and_contained(self, caplog):
        host = HostRuntime()
        seen = []

        def boom():
            raise RuntimeError("broken listener")

        host.add_listener(MAP_START, boom)
        host.add_listener(MAP_START, lambda: seen.append("ok"))
        host.start()
        with caplog.at_level(logging.ERROR, logger="core.host"):
            host.change_level("testmap")
        assert seen == ["ok"]
        assert "broken listener" in caplog.text
