# tests/config/test_config_store.py
"""Tests for ConfigStore and ModelCacheStore."""

import json
import logging

from claude_mode.config.config_store import ConfigStore, ModelCacheStore, get_config_dir
from claude_mode.config.models import LauncherConfig
from claude_mode.providers.models import Model
from tests.conftest import write_config


class TestGetConfigDir:
    def test_home_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CLAUDE_MODE_HOME", str(tmp_path / "custom"))
        assert get_config_dir() == tmp_path / "custom"

    def test_default_is_dot_claude_mode(self, monkeypatch, tmp_path):
        monkeypatch.delenv("CLAUDE_MODE_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert get_config_dir().name == ".claude-mode"


class TestConfigStoreLoad:
    """Test ConfigStore.load()."""

    def test_defaults_when_file_missing(self, config_dir):
        config = ConfigStore(config_dir).load()

        assert config.model_discovery_timeout == 5000
        assert config.health_check_timeout == 2000
        assert config.cache_ttl == 30000
        assert config.skip_health_check is False
        assert config.offline_mode is False
        assert config.headless_allowed_tools == "Read,Edit,Write,Bash,Glob,Grep"
        assert config.custom_providers == []
        assert config.default_provider == ""

    def test_missing_file_is_not_created(self, config_dir):
        ConfigStore(config_dir).load()
        assert not (config_dir / "claude-mode.json").exists()

    def test_reads_camel_case_keys(self, config_dir):
        write_config(
            config_dir,
            {
                "defaultProvider": "openrouter",
                "defaultModel": "sonnet",
                "cacheTTL": 1000,
                "offlineMode": True,
                "customProviders": [
                    {"key": "lab", "name": "Lab", "baseUrl": "http://lab:8000"}
                ],
            },
        )

        config = ConfigStore(config_dir).load()

        assert config.default_provider == "openrouter"
        assert config.default_model == "sonnet"
        assert config.cache_ttl == 1000
        assert config.offline_mode is True
        assert config.custom_providers[0].base_url == "http://lab:8000"
        # Unspecified keys keep their defaults
        assert config.health_check_timeout == 2000

    def test_malformed_json_falls_back_to_defaults(self, config_dir, caplog):
        config_dir.mkdir(parents=True)
        (config_dir / "claude-mode.json").write_text("{not json")

        with caplog.at_level(logging.WARNING, logger="claude_mode"):
            config = ConfigStore(config_dir).load()

        assert config == LauncherConfig()
        assert "Using defaults" in caplog.text
        # The broken file is left alone
        assert (config_dir / "claude-mode.json").read_text() == "{not json"

    def test_invalid_value_only_resets_that_field(self, config_dir, caplog):
        write_config(
            config_dir,
            {"modelDiscoveryTimeout": -5, "cacheTTL": "soon", "defaultModel": "sonnet"},
        )

        with caplog.at_level(logging.WARNING, logger="claude_mode"):
            config = ConfigStore(config_dir).load()

        assert config.model_discovery_timeout == 5000
        assert config.cache_ttl == 30000
        assert config.default_model == "sonnet"
        assert "modelDiscoveryTimeout" in caplog.text
        assert "cacheTTL" in caplog.text

    def test_invalid_custom_provider_is_dropped(self, config_dir, caplog):
        write_config(
            config_dir,
            {
                "defaultProvider": "lab",
                "customProviders": [
                    {"key": " ", "name": "Blank", "baseUrl": "http://blank"},
                    {"key": "lab", "name": "Lab", "baseUrl": "http://lab:8000"},
                ],
            },
        )

        with caplog.at_level(logging.WARNING, logger="claude_mode"):
            config = ConfigStore(config_dir).load()

        assert [p.key for p in config.custom_providers] == ["lab"]
        assert config.default_provider == "lab"
        assert "customProviders.0.key" in caplog.text

    def test_non_object_json_falls_back_to_defaults(self, config_dir):
        config_dir.mkdir(parents=True)
        (config_dir / "claude-mode.json").write_text("[1, 2]")
        assert ConfigStore(config_dir).load() == LauncherConfig()

    def test_load_is_cached_until_invalidated(self, config_dir):
        write_config(config_dir, {"defaultModel": "a"})
        store = ConfigStore(config_dir)
        first = store.load()

        write_config(config_dir, {"defaultModel": "b"})
        assert store.load() is first
        assert store.get("default_model") == "a"

        store.invalidate()
        assert store.get("default_model") == "b"


class TestConfigStoreWrite:
    """Test save(), update() and init()."""

    def test_save_writes_camel_case_and_invalidates(self, config_dir):
        store = ConfigStore(config_dir)
        before = store.load()

        store.save(LauncherConfig(default_provider="ollama-local", cache_ttl=10))

        data = json.loads((config_dir / "claude-mode.json").read_text())
        assert data["defaultProvider"] == "ollama-local"
        assert data["cacheTTL"] == 10
        assert store.load() is not before
        assert store.load().default_provider == "ollama-local"

    def test_update_merges_fields(self, config_dir):
        write_config(config_dir, {"defaultProvider": "openrouter", "cacheTTL": 5})
        store = ConfigStore(config_dir)

        config = store.update(default_model="haiku")

        assert config.default_provider == "openrouter"
        assert config.default_model == "haiku"
        assert config.cache_ttl == 5

    def test_init_creates_default_file(self, config_dir):
        path = ConfigStore(config_dir).init()

        assert path == config_dir / "claude-mode.json"
        data = json.loads(path.read_text())
        assert data["modelDiscoveryTimeout"] == 5000
        assert data["headlessAllowedTools"] == "Read,Edit,Write,Bash,Glob,Grep"

    def test_init_keeps_existing_file(self, config_dir):
        write_config(config_dir, {"defaultModel": "keep-me"})
        path = ConfigStore(config_dir).init()
        assert json.loads(path.read_text()) == {"defaultModel": "keep-me"}


class TestModelCacheStore:
    """Test the on-disk model cache."""

    def test_missing_file_is_empty(self, tmp_path):
        store = ModelCacheStore(tmp_path / "cache" / "models.json")
        assert store.load() == {}
        assert store.get_models("ollama-local") is None

    def test_save_and_read_back(self, tmp_path):
        cache_file = tmp_path / "cache" / "models.json"
        store = ModelCacheStore(cache_file, clock=lambda: 1234.0)

        store.save("ollama-local", [Model.from_discovered("llama3")])

        data = json.loads(cache_file.read_text())
        assert data["ollama-local"]["timestamp"] == 1234.0
        assert data["ollama-local"]["models"][0] == {
            "id": "llama3",
            "name": "llama3",
            "shortcut": "llama3",
        }
        assert store.get_models("ollama-local") == [Model.from_discovered("llama3")]

    def test_save_keeps_other_providers(self, tmp_path):
        store = ModelCacheStore(tmp_path / "models.json")
        store.save("a", [Model.from_discovered("m1")])
        store.save("b", [Model.from_discovered("m2")])
        store.save("a", [Model.from_discovered("m3")])

        assert [m.id for m in store.get_models("a")] == ["m3"]
        assert [m.id for m in store.get_models("b")] == ["m2"]

    def test_corrupt_cache_is_ignored(self, tmp_path):
        cache_file = tmp_path / "models.json"
        cache_file.write_text("garbage")
        store = ModelCacheStore(cache_file)

        assert store.load() == {}
        # Saving replaces the corrupt file
        store.save("a", [Model.from_discovered("m1")])
        assert store.get_models("a")[0].id == "m1"
