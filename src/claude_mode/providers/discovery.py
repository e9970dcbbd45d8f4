# src/claude_mode/providers/discovery.py
"""
Model discovery for providers with an OpenAI-compatible ``/v1/models`` API.

Lookup order for dynamic providers:

1. in-memory cache entry younger than ``cacheTTL``
2. offline mode: disk cache only, no network
3. live ``GET {base_url}/v1/models``
4. on failure: disk cache, else an empty list

``get_models`` never raises for network or parse failures; the classified
reason for the last failure is kept per provider in ``last_error``.
"""

from __future__ import annotations

import logging

import httpx

from claude_mode.config.config_store import Clock, ConfigStore, ModelCacheStore, now_ms
from claude_mode.errors import (
    ClassifiedError,
    ErrorCode,
    classify_error,
    model_fetch_failed_error,
)
from claude_mode.providers.http import fetch_json
from claude_mode.providers.models import Model, ModelCacheEntry, Provider
from claude_mode.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


def parse_models_response(data: object) -> list[Model]:
    """Turn ``{"data": [{"id": ...}, ...]}`` into models; entries without an id are skipped."""
    if not isinstance(data, dict):
        raise ValueError("Unexpected models response: expected a JSON object")
    entries = data.get("data")
    if not isinstance(entries, list):
        raise ValueError("Unexpected models response: missing 'data' list")

    models: list[Model] = []
    for entry in entries:
        if isinstance(entry, dict) and isinstance(entry.get("id"), str) and entry["id"]:
            models.append(Model.from_discovered(entry["id"]))
    return models


class ModelDiscovery:
    """Per-provider model lists with an in-memory TTL cache and a disk fallback."""

    def __init__(
        self,
        registry: ProviderRegistry,
        config_store: ConfigStore,
        cache_store: ModelCacheStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Clock = now_ms,
    ):
        self._registry = registry
        self._config_store = config_store
        self._cache_store = cache_store or ModelCacheStore(
            config_store.cache_file, clock=clock
        )
        self._transport = transport
        self._clock = clock
        self._memory: dict[str, ModelCacheEntry] = {}
        self._errors: dict[str, ClassifiedError] = {}

    async def get_models(self, provider_key: str) -> list[Model]:
        provider = self._registry.get_provider(provider_key)
        if provider is None:
            return []
        if not provider.is_dynamic:
            return list(provider.models)

        key = provider.key
        config = self._config_store.load()

        cached = self._memory.get(key)
        if cached is not None and self._clock() - cached.timestamp < config.cache_ttl:
            logger.debug("Using in-memory models for %s", key)
            return list(cached.models)

        if config.offline_mode:
            logger.debug("Offline mode: using disk cache for %s", key)
            return self._cache_store.get_models(key) or []

        try:
            models = await self._fetch(provider, config.model_discovery_timeout)
        except Exception as e:
            return self._fallback(key, e)

        entry = self._cache_store.save(key, models)
        self._memory[key] = entry
        self._errors.pop(key, None)
        logger.info("Discovered %d models from %s", len(models), key)
        return models

    async def _fetch(self, provider: Provider, timeout_ms: int) -> list[Model]:
        data = await fetch_json(
            provider.models_url(),
            provider.auth_headers(),
            timeout_ms,
            transport=self._transport,
        )
        return parse_models_response(data)

    def _fallback(self, key: str, exc: Exception) -> list[Model]:
        error = classify_error(exc)
        if error.code is ErrorCode.UNKNOWN:
            error = model_fetch_failed_error(key, error.message, cause=exc)
        self._errors[key] = error

        disk_models = self._cache_store.get_models(key)
        if disk_models:
            logger.warning(
                "Model discovery failed for %s (%s); using %d cached models",
                key,
                error.message,
                len(disk_models),
            )
            return disk_models

        logger.error("Model discovery failed for %s: %s", key, error.message)
        return []

    def last_error(self, provider_key: str) -> ClassifiedError | None:
        """Why the most recent live fetch for *provider_key* failed, if it did."""
        return self._errors.get(provider_key)

    def clear_cache(self, provider_key: str | None = None) -> None:
        """Forget in-memory entries (one provider or all). The disk cache is kept."""
        if provider_key is None:
            self._memory.clear()
        else:
            self._memory.pop(provider_key, None)
