#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

"""Tests for configuration, logging and the shared cache."""

import pytest

from mapbridge import ArgErr, BoundedCache, BridgeConfig, BridgeContext, Log, LogLevel


class TestBridgeConfig:
    """Test props parsing and typed accessors."""

    def test_defaults(self) -> None:
        """Test an empty configuration uses the documented defaults."""
        config = BridgeConfig()
        assert config.fieldSuffix() == "$"
        assert config.classCacheSize() == 256
        assert config.eagerNamespace() is False
        assert config.logLevel() == LogLevel.INFO

    def test_read_props(self) -> None:
        """Test comments and blank lines are skipped and values trimmed."""
        props = BridgeConfig.readProps(
            "# bridge settings\n\n// old style comment\nfieldSuffix = _f \nlogLevel=debug\nnot a pair\n")
        assert props == {"fieldSuffix": "_f", "logLevel": "debug"}

    def test_load_file(self, tmp_path) -> None:
        """Test an explicit path wins and is recorded as the uri."""
        path = tmp_path / "config.props"
        path.write_text("eagerNamespace=yes\nclassCacheSize=8\n", encoding="utf-8")
        config = BridgeConfig.load(str(path))
        assert config.eagerNamespace() is True
        assert config.classCacheSize() == 8
        assert config.uri() == str(path)

    def test_load_from_env(self, tmp_path, monkeypatch) -> None:
        """Test the environment variable locates the file."""
        path = tmp_path / "bridge.props"
        path.write_text("logLevel=warn\n", encoding="utf-8")
        monkeypatch.setenv(BridgeConfig.ENV_VAR, str(path))
        assert BridgeConfig.load().logLevel() == LogLevel.WARN

    def test_missing_file_uses_defaults(self, tmp_path) -> None:
        """Test a missing file is not an error."""
        config = BridgeConfig.load(str(tmp_path / "absent.props"))
        assert config.fieldSuffix() == "$"

    @pytest.mark.parametrize("props", [
        {"fieldSuffix": ""},
        {"classCacheSize": "0"},
        {"classCacheSize": "lots"},
        {"eagerNamespace": "maybe"},
        {"logLevel": "loud"},
    ])
    def test_invalid_values(self, props) -> None:
        """Test malformed values are rejected on construction."""
        with pytest.raises(ArgErr):
            BridgeConfig(props)

    def test_context_applies_log_level(self, table) -> None:
        """Test starting a context sets the level of every bridge log."""
        log = Log.get("mapbridge.proxy")
        with BridgeContext(lambda: table, BridgeConfig({"logLevel": "debug"})):
            assert log.isDebug()
            assert Log.get("mapbridge.test.late").level() == LogLevel.DEBUG


class TestLog:
    """Test the log facade."""

    def test_handlers_receive_records(self, records) -> None:
        """Test a registered handler sees enabled records only."""
        log = Log.get("mapbridge.test")
        log.level(LogLevel.WARN)
        log.info("quiet")
        log.warn("loud")
        mine = [r for r in records if r.logName() == "mapbridge.test"]
        assert [r.msg() for r in mine] == ["loud"]
        assert mine[0].toStr() == "[warn] mapbridge.test: loud"

    def test_failing_handler_does_not_break_logging(self, records) -> None:
        """Test an exception in one handler still reaches the others."""
        def bad(rec):
            raise RuntimeError("handler broke")

        Log.addHandler(bad)
        try:
            Log.get("mapbridge.test").err("still delivered")
        finally:
            Log.removeHandler(bad)
        assert any(r.msg() == "still delivered" for r in records)

    def test_invalid_name(self) -> None:
        """Test log names are restricted to identifier characters."""
        with pytest.raises(ArgErr):
            Log.get("bad name!")

    def test_level_from_str(self) -> None:
        """Test level parsing is case insensitive and checked."""
        assert LogLevel.fromStr("WARN") == LogLevel.WARN
        assert LogLevel.fromStr("loud", False) is None
        with pytest.raises(ArgErr):
            LogLevel.fromStr("loud")


class TestBoundedCache:
    """Test the LRU cache shared by class proxies."""

    def test_evicts_least_recently_used(self) -> None:
        """Test the oldest untouched entry is evicted first."""
        cache = BoundedCache(2)
        cache.set("a", 1).set("b", 2)
        assert cache.get("a") == 1
        cache.set("c", 3)
        assert cache.containsKey("a")
        assert not cache.containsKey("b")
        assert cache.evictions() == 1
        assert cache.size() == 2

    def test_get_or_add(self) -> None:
        """Test the factory runs only for a missing key."""
        cache = BoundedCache(4)
        calls = []
        assert cache.getOrAdd("k", lambda: calls.append(1) or "v") == "v"
        assert cache.getOrAdd("k", lambda: calls.append(1) or "w") == "v"
        assert len(calls) == 1

    def test_failed_factory_is_not_cached(self) -> None:
        """Test nothing is stored when the factory raises."""
        cache = BoundedCache(4)

        def factory():
            raise ValueError("nope")

        with pytest.raises(ValueError):
            cache.getOrAdd("k", factory)
        assert cache.isEmpty()

    def test_capacity_must_be_positive(self) -> None:
        with pytest.raises(ArgErr):
            BoundedCache(0)
