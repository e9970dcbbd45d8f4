# tests/commands/test_completion.py
"""Tests for shell completion script generation."""

import pytest

from claude_mode.commands.completion import SUBCOMMANDS, Shell, generate_completion
from claude_mode.providers.builtin import PROVIDER_ALIASES
from tests.conftest import make_context, write_config


@pytest.fixture
def providers(config_dir):
    return make_context(config_dir).registry.get_providers()


class TestGenerateCompletion:
    @pytest.mark.parametrize("shell", list(Shell))
    def test_lists_providers_aliases_and_subcommands(self, shell, providers):
        script = generate_completion(shell, providers)

        for key in providers:
            assert key in script
        for alias in PROVIDER_ALIASES:
            assert alias in script
        for command in SUBCOMMANDS:
            assert command in script

    def test_bash_registers_function(self, providers):
        script = generate_completion(Shell.BASH, providers)
        assert "complete -F _claude_mode_completions claude-mode" in script
        assert "sonnet" in script
        assert "headless" in script

    def test_zsh_header(self, providers):
        script = generate_completion(Shell.ZSH, providers)
        assert script.startswith("#compdef claude-mode")
        assert "'ol:Ollama Local (alias)'" in script

    def test_fish_descriptions(self, providers):
        script = generate_completion(Shell.FISH, providers)
        assert '-a "openrouter" -d "OpenRouter"' in script
        assert "dangerously-skip-permissions" in script

    def test_custom_provider_included(self, config_dir):
        write_config(
            config_dir,
            {"customProviders": [{"key": "lab", "name": "Lab", "baseUrl": "http://lab"}]},
        )
        providers = make_context(config_dir).registry.get_providers()

        assert '-a "lab" -d "Lab"' in generate_completion(Shell.FISH, providers)
