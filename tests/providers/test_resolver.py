# tests/providers/test_resolver.py
"""Tests for model shortcut resolution."""

import httpx
import pytest

from claude_mode.providers.models import Model, ResolutionKind
from claude_mode.providers.resolver import find_model
from tests.conftest import make_context, models_payload


class TestFindModel:
    def test_first_match_in_list_order(self):
        models = [
            Model(id="a-id", name="Sonnet", shortcut="a"),
            Model(id="sonnet", name="B", shortcut="b"),
            Model(id="c-id", name="C", shortcut="sonnet"),
        ]
        # A name match early in the list beats a shortcut match later on
        assert find_model(models, "sonnet").id == "a-id"

    def test_each_criterion_matches(self):
        models = [Model(id="x-id", name="Target Model", shortcut="tgt")]
        assert find_model(models, "tgt").id == "x-id"
        assert find_model(models, "x-id").id == "x-id"
        assert find_model(models, "target model").id == "x-id"

    def test_shortcut_and_id_are_case_sensitive(self):
        models = [Model(id="qwen3", name="Qwen 3", shortcut="q3")]
        assert find_model(models, "Q3") is None
        assert find_model(models, "QWEN3") is None

    def test_name_is_case_insensitive(self):
        models = [Model(id="z", name="Claude Opus 4.5", shortcut="opus")]
        assert find_model(models, "claude opus 4.5").id == "z"

    def test_duplicate_names_first_wins(self):
        models = [
            Model(id="first", name="Dup", shortcut="s1"),
            Model(id="second", name="Dup", shortcut="s2"),
        ]
        assert find_model(models, "dup").id == "first"

    def test_no_match(self):
        assert find_model([], "anything") is None


class TestModelResolver:
    """Test ModelResolver against static and dynamic providers."""

    @pytest.mark.asyncio
    async def test_static_shortcut(self, config_dir):
        ctx = make_context(config_dir)

        resolution = await ctx.resolver.resolve_model("openrouter", "sonnet")

        assert resolution.kind is ResolutionKind.RESOLVED
        assert resolution.model_id == "anthropic/claude-sonnet-4.5"
        assert resolution.model.name == "Claude Sonnet 4.5"
        assert resolution.requested == "sonnet"

    @pytest.mark.asyncio
    async def test_provider_alias(self, config_dir):
        ctx = make_context(config_dir)
        assert await ctx.resolver.resolve_model_id("or", "opus") == "anthropic/claude-opus-4.5"

    @pytest.mark.asyncio
    async def test_static_by_name(self, config_dir):
        ctx = make_context(config_dir)
        model_id = await ctx.resolver.resolve_model_id("openrouter", "gemini 3 pro preview")
        assert model_id == "google/gemini-3-pro-preview"

    @pytest.mark.asyncio
    async def test_unknown_model_passes_through(self, config_dir):
        ctx = make_context(config_dir)

        resolution = await ctx.resolver.resolve_model("openrouter", "meta/llama-4")

        assert resolution.kind is ResolutionKind.PASS_THROUGH
        assert resolution.model_id == "meta/llama-4"
        assert resolution.model is None
        assert not resolution.is_resolved

    @pytest.mark.asyncio
    async def test_unknown_provider_passes_through(self, config_dir):
        ctx = make_context(config_dir)
        resolution = await ctx.resolver.resolve_model("nope", "sonnet")
        assert resolution.kind is ResolutionKind.PASS_THROUGH
        assert resolution.model_id == "sonnet"

    @pytest.mark.asyncio
    async def test_dynamic_provider_uses_discovery(self, config_dir):
        ctx = make_context(
            config_dir,
            lambda request: httpx.Response(200, json=models_payload("qwen3:8b")),
        )
        resolution = await ctx.resolver.resolve_model("ol", "qwen3:8b")
        assert resolution.is_resolved
        assert resolution.model_id == "qwen3:8b"

    @pytest.mark.asyncio
    async def test_dynamic_provider_unreachable_passes_through(self, config_dir):
        def refused(request):
            raise httpx.ConnectError("Connection refused", request=request)

        ctx = make_context(config_dir, refused)

        resolution = await ctx.resolver.resolve_model("ollama-local", "qwen3")

        assert resolution.kind is ResolutionKind.PASS_THROUGH
        assert resolution.model_id == "qwen3"
