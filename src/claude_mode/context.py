# src/claude_mode/context.py
"""
Application context for claude-mode.

Owns every stateful component (config store, registry, discovery, resolver,
health checker) so caches live exactly as long as one CLI invocation and
tests can build isolated instances.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import httpx
from pydantic import BaseModel, ConfigDict, SkipValidation

from claude_mode.config.config_store import Clock, ConfigStore, ModelCacheStore, now_ms
from claude_mode.config.models import LauncherConfig
from claude_mode.providers.discovery import ModelDiscovery
from claude_mode.providers.health import HealthChecker
from claude_mode.providers.registry import ProviderRegistry
from claude_mode.providers.resolver import ModelResolver


class ApplicationContext(BaseModel):
    """Holds the components shared by every command."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    # Skip validation so tests can pass mocks
    config_store: Annotated[ConfigStore, SkipValidation()]
    registry: Annotated[ProviderRegistry, SkipValidation()]
    discovery: Annotated[ModelDiscovery, SkipValidation()]
    resolver: Annotated[ModelResolver, SkipValidation()]
    health_checker: Annotated[HealthChecker, SkipValidation()]

    verbose: bool = False

    @classmethod
    def create(
        cls,
        config_dir: Path | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Clock = now_ms,
        **kwargs: Any,
    ) -> ApplicationContext:
        """Wire up a fresh set of components rooted at *config_dir*."""
        config_store = ConfigStore(config_dir)
        registry = ProviderRegistry(config_store)
        discovery = ModelDiscovery(
            registry,
            config_store,
            cache_store=ModelCacheStore(config_store.cache_file, clock=clock),
            transport=transport,
            clock=clock,
        )
        return cls(
            config_store=config_store,
            registry=registry,
            discovery=discovery,
            resolver=ModelResolver(registry, discovery),
            health_checker=HealthChecker(registry, config_store, transport=transport),
            **kwargs,
        )

    @property
    def config(self) -> LauncherConfig:
        return self.config_store.load()

    def reload(self) -> None:
        """Drop cached config, providers and models after files changed."""
        self.config_store.invalidate()
        self.registry.clear_cache()
        self.discovery.clear_cache()
