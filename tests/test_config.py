"""
Tests for configuration loading and resolution.
"""

import pytest

from contextizer import Contextizer
from contextizer.config.loader import Config, _merge_dict, load_config
from contextizer.config.resolver import resolve_config
from contextizer.config.singleton import GlobalConfig, get_config
from contextizer.exceptions import ConfigurationError


class TestConfig:
    """Tests for Config class."""

    def test_basic_access(self):
        cfg = Config({"name": "test", "engine": {"cached_failures": "evict"}})
        assert cfg.get("name") == "test"
        assert cfg.engine == {"cached_failures": "evict"}
        assert cfg.logging == {}

    def test_dot_notation(self):
        cfg = Config({"engine": {"cached_failures": "pin"}})
        assert cfg.get("engine.cached_failures") == "pin"

    def test_dot_notation_missing_returns_default(self):
        cfg = Config({"a": 1})
        assert cfg.get("a.b.c", "fallback") == "fallback"

    def test_contains(self):
        cfg = Config({"a": {"b": 1}})
        assert "a" in cfg
        assert "a.b" in cfg
        assert "a.c" not in cfg
        assert "z" not in cfg

    def test_getitem(self):
        cfg = Config({"name": "test", "nested": {"key": "val"}})
        assert cfg["name"] == "test"
        nested = cfg["nested"]
        assert isinstance(nested, Config)
        assert nested["key"] == "val"
        assert cfg["nested.key"] == "val"

    def test_getitem_missing_raises(self):
        cfg = Config({"a": 1})
        with pytest.raises(KeyError):
            _ = cfg["missing"]
        with pytest.raises(KeyError):
            _ = cfg["a.b"]

    def test_validate_valid(self):
        Config({"engine": {"cached_failures": "evict"}, "logging": {"level": "DEBUG"}}).validate()
        Config({}).validate()

    def test_validate_bad_section(self):
        with pytest.raises(ConfigurationError, match="'engine' must be a dictionary"):
            Config({"engine": ["x"]}).validate()

    def test_validate_bad_policy(self):
        with pytest.raises(ConfigurationError, match="cached_failures"):
            Config({"engine": {"cached_failures": "sometimes"}}).validate()

    def test_validate_not_a_mapping(self):
        with pytest.raises(ConfigurationError):
            Config(["a"]).validate()


class TestResolver:
    def test_env_var_substitution(self, monkeypatch):
        monkeypatch.setenv("CTX_LOG_LEVEL", "DEBUG")
        resolved = resolve_config({"logging": {"level": "${CTX_LOG_LEVEL}"}})
        assert resolved == {"logging": {"level": "DEBUG"}}

    def test_unset_var_left_alone(self, monkeypatch):
        monkeypatch.delenv("CTX_NOT_SET", raising=False)
        assert resolve_config({"x": "${CTX_NOT_SET}"}) == {"x": "${CTX_NOT_SET}"}

    def test_fallback_used_when_unset_or_empty(self, monkeypatch):
        monkeypatch.delenv("CTX_NOT_SET", raising=False)
        monkeypatch.setenv("CTX_EMPTY", "")
        monkeypatch.setenv("CTX_SET", "evict")
        resolved = resolve_config({"a": "${CTX_NOT_SET:-pin}", "b": "${CTX_EMPTY:-pin}", "c": "${CTX_SET:-pin}"})
        assert resolved == {"a": "pin", "b": "pin", "c": "evict"}

    def test_env_placeholder_in_lists(self):
        assert resolve_config({"files": ["logs/{env}.log", 3]}, env="prod") == {"files": ["logs/prod.log", 3]}

    def test_merge_dict(self):
        base = {"engine": {"cached_failures": "pin"}, "logging": {"level": "INFO", "file": "a.log"}}
        _merge_dict(base, {"logging": {"level": "DEBUG"}})
        assert base == {"engine": {"cached_failures": "pin"}, "logging": {"level": "DEBUG", "file": "a.log"}}


class TestLoadConfig:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="contextizer.yaml"):
            load_config(tmp_path)

    def test_load_with_env_override(self, tmp_path):
        (tmp_path / "contextizer.yaml").write_text(
            "engine:\n  cached_failures: pin\nlogging:\n  level: INFO\n  file: logs/{env}.log\n"
        )
        (tmp_path / "contextizer.prod.yaml").write_text("engine:\n  cached_failures: evict\n")

        cfg = load_config(tmp_path, env="prod")
        assert cfg.get("engine.cached_failures") == "evict"
        assert cfg.get("logging.level") == "INFO"
        assert cfg.get("logging.file") == "logs/prod.log"

    def test_empty_file(self, tmp_path):
        (tmp_path / "contextizer.yaml").write_text("")
        assert load_config(tmp_path).data == {}

    def test_yaml_error_reports_position(self, tmp_path):
        (tmp_path / "contextizer.yaml").write_text("engine:\n  cached_failures: [pin\n")
        with pytest.raises(ConfigurationError, match="line"):
            load_config(tmp_path)

    def test_non_mapping_rejected(self, tmp_path):
        (tmp_path / "contextizer.yaml").write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_config(tmp_path)

    def test_invalid_values_rejected(self, tmp_path):
        (tmp_path / "contextizer.yaml").write_text("engine:\n  cached_failures: never\n")
        with pytest.raises(ConfigurationError):
            load_config(tmp_path)


class TestFromProject:
    def test_installs_global_config(self, tmp_path, monkeypatch):
        monkeypatch.delenv("CONTEXTIZER_ENV", raising=False)
        (tmp_path / "contextizer.yaml").write_text(
            "engine:\n  cached_failures: evict\nlogging:\n  level: WARNING\n  console_type: plain\n"
        )
        ctx = Contextizer.from_project(tmp_path)
        assert ctx.executor.cached_failures == "evict"
        assert get_config() is ctx.config
        assert GlobalConfig.get_config().get("logging.level") == "WARNING"
        assert GlobalConfig.get_project_dir() == tmp_path

    def test_env_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CONTEXTIZER_ENV", "staging")
        (tmp_path / "contextizer.yaml").write_text("logging:\n  console_enabled: false\n")
        (tmp_path / "contextizer.staging.yaml").write_text("engine:\n  cached_failures: evict\n")
        ctx = Contextizer.from_project(tmp_path)
        assert ctx.executor.cached_failures == "evict"

    def test_accepts_plain_dict(self):
        ctx = Contextizer({"engine": {"cached_failures": "evict"}})
        assert isinstance(ctx.config, Config)
        assert ctx.executor.cached_failures == "evict"
