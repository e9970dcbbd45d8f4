# src/claude_mode/providers/resolver.py
"""Resolve user-supplied model shortcuts into provider-native model ids."""

from __future__ import annotations

import logging

from claude_mode.providers.builtin import resolve_provider_alias
from claude_mode.providers.discovery import ModelDiscovery
from claude_mode.providers.models import Model, ModelResolution
from claude_mode.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


def find_model(models: list[Model], value: str) -> Model | None:
    """
    First model in list order whose shortcut or id equals *value*, or whose
    name equals it case-insensitively.
    """
    lowered = value.lower()
    for model in models:
        if model.shortcut == value or model.id == value or model.name.lower() == lowered:
            return model
    return None


class ModelResolver:
    """Looks models up in the static table or through discovery."""

    def __init__(self, registry: ProviderRegistry, discovery: ModelDiscovery):
        self._registry = registry
        self._discovery = discovery

    async def resolve_model(self, provider_key: str, value: str) -> ModelResolution:
        key = resolve_provider_alias(provider_key)
        provider = self._registry.get_provider(key)
        if provider is None:
            return ModelResolution.pass_through(value)

        if provider.is_dynamic:
            models = await self._discovery.get_models(provider.key)
        else:
            models = list(provider.models)

        model = find_model(models, value)
        if model is None:
            logger.debug("No model matches %r on %s; passing through", value, key)
            return ModelResolution.pass_through(value)
        return ModelResolution.resolved(model, value)

    async def resolve_model_id(self, provider_key: str, value: str) -> str:
        resolution = await self.resolve_model(provider_key, value)
        return resolution.model_id
