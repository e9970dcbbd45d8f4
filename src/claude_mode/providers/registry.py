# src/claude_mode/providers/registry.py
"""Provider registry: built-in providers merged with custom ones from config."""

from __future__ import annotations

import logging

from claude_mode.config.config_store import ConfigStore
from claude_mode.config.models import CustomProviderConfig, LauncherConfig
from claude_mode.providers.builtin import BUILTIN_PROVIDERS, resolve_provider_alias
from claude_mode.providers.models import DiscoveryMode, Provider

logger = logging.getLogger(__name__)


def provider_from_custom(custom: CustomProviderConfig) -> Provider:
    """Build a Provider from a ``customProviders`` config entry.

    Custom providers are OpenAI-compatible endpoints, so their models are
    always discovered through the API.
    """
    return Provider(
        key=custom.key,
        name=custom.name,
        description=custom.description or "",
        discovery_mode=DiscoveryMode.DYNAMIC_API,
        is_built_in=False,
        default_base_url=custom.base_url,
        auth_token_env=(custom.auth_env_var,) if custom.auth_env_var else (),
        default_auth_token=custom.auth_token or "",
    )


class ProviderRegistry:
    """
    Snapshot of every known provider, keyed by provider key.

    The snapshot is rebuilt when ``clear_cache`` is called or when the
    config store hands out a newly loaded config.
    """

    def __init__(self, config_store: ConfigStore):
        self._config_store = config_store
        self._providers: dict[str, Provider] | None = None
        self._source: LauncherConfig | None = None

    def get_providers(self) -> dict[str, Provider]:
        config = self._config_store.load()
        if self._providers is not None and config is self._source:
            return self._providers

        providers: dict[str, Provider] = {p.key: p for p in BUILTIN_PROVIDERS}
        for custom in config.custom_providers:
            if custom.key in providers:
                logger.debug("Custom provider %s overrides existing entry", custom.key)
            providers[custom.key] = provider_from_custom(custom)

        self._providers = providers
        self._source = config
        return providers

    def get_provider(self, key_or_alias: str) -> Provider | None:
        """Look up by key or alias. Returns None for unknown providers."""
        return self.get_providers().get(resolve_provider_alias(key_or_alias))

    def provider_keys(self) -> list[str]:
        return list(self.get_providers())

    def clear_cache(self) -> None:
        self._providers = None
        self._source = None
