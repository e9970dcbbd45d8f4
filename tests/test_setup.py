# tests/test_setup.py
"""Tests for the setup wizard's status detection and file writing."""

import json
from datetime import datetime, timezone
from unittest.mock import patch

import httpx
import pytest

from claude_mode.errors import ClaudeModeError, ErrorCode
from claude_mode.setup import (
    ProviderSetupConfig,
    SetupDefaults,
    SetupStatus,
    build_env_vars,
    detect_setup_status,
    format_env_file,
    is_valid_url,
    load_env_file,
    mask_secret,
    merge_env_file,
    run_setup,
    save_configuration,
    save_env_file,
)
from tests.conftest import make_context, models_payload, write_config

FIXED_NOW = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


class TestDetectSetupStatus:
    def test_first_time_without_config_file(self, config_dir):
        assert detect_setup_status(make_context(config_dir)) is SetupStatus.FIRST_TIME

    def test_missing_defaults_is_incomplete(self, config_dir):
        write_config(config_dir, {"configuredProviders": ["ollama-local"]})
        assert detect_setup_status(make_context(config_dir)) is SetupStatus.INCOMPLETE

    def test_no_configured_providers_is_incomplete(self, config_dir):
        write_config(config_dir, {"defaultProvider": "ollama-local", "defaultModel": "qwen3"})
        assert detect_setup_status(make_context(config_dir)) is SetupStatus.INCOMPLETE

    def test_missing_api_key_is_incomplete(self, config_dir):
        write_config(
            config_dir,
            {
                "defaultProvider": "openrouter",
                "defaultModel": "sonnet",
                "configuredProviders": ["openrouter"],
            },
        )
        assert detect_setup_status(make_context(config_dir)) is SetupStatus.INCOMPLETE

    def test_complete(self, config_dir, monkeypatch):
        monkeypatch.setenv("OPEN_ROUTER_API_KEY", "sk-or-abc")
        write_config(
            config_dir,
            {
                "defaultProvider": "openrouter",
                "defaultModel": "sonnet",
                "configuredProviders": ["openrouter", "ollama-local"],
            },
        )
        assert detect_setup_status(make_context(config_dir)) is SetupStatus.COMPLETE


class TestHelpers:
    def test_mask_secret(self):
        assert mask_secret("sk-or-v1-abcdefghijklmnop") == "sk-or-v1...mnop"
        assert mask_secret("short") == "shor..."

    @pytest.mark.parametrize(
        "value, valid",
        [
            ("http://192.168.1.10:11434", True),
            ("https://ollama.example.com", True),
            ("ftp://host", False),
            ("not a url", False),
            ("", False),
        ],
    )
    def test_is_valid_url(self, value, valid):
        assert is_valid_url(value) is valid


class TestBuildEnvVars:
    def test_all_providers(self):
        env_vars = build_env_vars(
            [
                ProviderSetupConfig(key="openrouter", name="OpenRouter", api_key="sk-or"),
                ProviderSetupConfig(key="ollama-cloud", name="Ollama Cloud", api_key="oc"),
                ProviderSetupConfig(key="ollama-local", name="Ollama Local"),
                ProviderSetupConfig(
                    key="ollama-custom", name="Ollama Custom", custom_url=" http://gpu:11434 "
                ),
            ]
        )
        assert env_vars == {
            "ANTHROPIC_BASE_URL": "https://openrouter.ai/api",
            "ANTHROPIC_AUTH_TOKEN": "sk-or",
            "OPEN_ROUTER_API_KEY": "sk-or",
            "OLLAMA_HOST": "https://ollama.com",
            "OLLAMA_API_KEY": "oc",
            "OLLAMA_BASE_URL_LOCAL": "http://localhost:11434",
            "OLLAMA_BASE_URL_CUSTOM": "http://gpu:11434",
        }

    def test_keyless_provider_kept_key_skipped(self):
        """A provider that kept its existing key writes nothing new."""
        env_vars = build_env_vars([ProviderSetupConfig(key="openrouter", name="OpenRouter")])
        assert env_vars == {}


class TestEnvFiles:
    def test_format_sections(self):
        content = format_env_file(
            {"OLLAMA_BASE_URL_LOCAL": "http://localhost:11434", "EXTRA": "1"}, now=FIXED_NOW
        )
        lines = content.splitlines()

        assert lines[0] == "# claude-mode configuration"
        assert lines[1] == "# Generated by: claude-mode setup"
        assert lines[2] == "# Date: 2025-01-02T03:04:05+00:00"
        assert "# Ollama Local" in lines
        assert "OLLAMA_BASE_URL_LOCAL=http://localhost:11434" in lines
        assert "# OpenRouter" not in lines
        assert lines.index("# Other") < lines.index("EXTRA=1")

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "nested" / ".env"
        save_env_file({"OLLAMA_API_KEY": "oc-key"}, path, now=FIXED_NOW)
        assert load_env_file(path) == {"OLLAMA_API_KEY": "oc-key"}

    def test_load_missing_file(self, tmp_path):
        assert load_env_file(tmp_path / "absent.env") == {}

    def test_merge_new_values_win(self, tmp_path):
        path = tmp_path / ".env"
        path.write_text(
            "USER_SETTING=keep\nOLLAMA_API_KEY=old\n_claude_mode_marker=1\n"
        )

        merge_env_file({"OLLAMA_API_KEY": "new"}, path, now=FIXED_NOW)

        assert load_env_file(path) == {"USER_SETTING": "keep", "OLLAMA_API_KEY": "new"}
        assert path.read_text().startswith("# claude-mode configuration")

    def test_special_characters_survive_save(self, tmp_path):
        path = tmp_path / ".env"
        values = {
            "ANTHROPIC_AUTH_TOKEN": "abc def #x",
            "OLLAMA_API_KEY": "it's",
            "EXTRA": "back\\slash",
        }

        save_env_file(values, path, now=FIXED_NOW)

        assert load_env_file(path) == values
        assert "OLLAMA_API_KEY='it\\'s'" in path.read_text().splitlines()

    def test_special_characters_survive_merge(self, tmp_path):
        path = tmp_path / ".env"
        path.write_text("USER_SETTING='two words'\n")

        merge_env_file({"OLLAMA_API_KEY": "key # with comment"}, path, now=FIXED_NOW)
        merge_env_file({}, path, now=FIXED_NOW)

        assert load_env_file(path) == {
            "USER_SETTING": "two words",
            "OLLAMA_API_KEY": "key # with comment",
        }

    def test_plain_values_are_not_quoted(self):
        content = format_env_file({"OLLAMA_API_KEY": "oc-key"}, now=FIXED_NOW)
        assert "OLLAMA_API_KEY=oc-key" in content.splitlines()

    def test_write_failure_is_setup_write_failed(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("")

        with pytest.raises(ClaudeModeError) as exc_info:
            save_env_file({"A": "1"}, blocker / ".env")

        assert exc_info.value.code is ErrorCode.SETUP_WRITE_FAILED


class TestSaveConfiguration:
    def test_writes_config_and_env(self, config_dir):
        write_config(config_dir, {"cacheTTL": 1234})
        ctx = make_context(config_dir)

        save_configuration(
            ctx,
            [ProviderSetupConfig(key="ollama-cloud", name="Ollama Cloud", api_key="oc")],
            SetupDefaults(provider="ollama-cloud", model="gpt-oss:120b"),
        )

        data = json.loads((config_dir / "claude-mode.json").read_text())
        assert data["defaultProvider"] == "ollama-cloud"
        assert data["defaultModel"] == "gpt-oss:120b"
        assert data["configuredProviders"] == ["ollama-cloud"]
        assert data["cacheTTL"] == 1234
        assert load_env_file(config_dir / ".env") == {
            "OLLAMA_HOST": "https://ollama.com",
            "OLLAMA_API_KEY": "oc",
        }

    def test_existing_env_file_is_merged(self, config_dir):
        config_dir.mkdir(parents=True)
        (config_dir / ".env").write_text("MY_VAR=1\n")
        ctx = make_context(config_dir)

        save_configuration(
            ctx,
            [ProviderSetupConfig(key="ollama-local", name="Ollama Local")],
            SetupDefaults(provider="ollama-local", model="qwen3"),
        )

        assert load_env_file(config_dir / ".env") == {
            "MY_VAR": "1",
            "OLLAMA_BASE_URL_LOCAL": "http://localhost:11434",
        }


class TestRunSetup:
    """Drive run_setup() with the prompts patched."""

    @pytest.mark.asyncio
    async def test_single_provider_flow(self, config_dir):
        ctx = make_context(
            config_dir, lambda request: httpx.Response(200, json=models_payload("qwen3"))
        )

        with patch("claude_mode.setup.confirm", return_value=True), patch(
            "claude_mode.setup.select_from_list", return_value="qwen3 (qwen3)"
        ):
            saved = await run_setup(ctx, provider="ol", skip_validation=True)

        assert saved is True
        config = ctx.config_store.load()
        assert config.default_provider == "ollama-local"
        assert config.default_model == "qwen3"
        assert config.configured_providers == ["ollama-local"]

    @pytest.mark.asyncio
    async def test_declining_welcome_cancels(self, config_dir):
        ctx = make_context(config_dir)

        with patch("claude_mode.setup.confirm", return_value=False):
            with pytest.raises(ClaudeModeError) as exc_info:
                await run_setup(ctx)

        assert exc_info.value.code is ErrorCode.SETUP_CANCELLED
        assert not (config_dir / "claude-mode.json").exists()

    @pytest.mark.asyncio
    async def test_skip_keeps_existing_config(self, config_dir):
        write_config(config_dir, {"defaultProvider": "openrouter", "defaultModel": "sonnet"})
        ctx = make_context(config_dir)

        with patch("claude_mode.setup.select_from_list", return_value="Skip (use existing config)"):
            assert await run_setup(ctx) is False
