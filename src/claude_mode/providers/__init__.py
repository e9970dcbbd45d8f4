# src/claude_mode/providers/__init__.py
"""
Provider and model management for claude-mode.

- Pydantic models for providers, models and resolution results
- Built-in providers and aliases
- Registry merging built-ins with custom providers from config
- Model discovery with in-memory and disk caches
- Health checks
"""

from claude_mode.providers.builtin import (
    BUILTIN_PROVIDERS,
    PROVIDER_ALIASES,
    resolve_provider_alias,
)
from claude_mode.providers.models import (
    DiscoveryMode,
    HealthCheckResult,
    Model,
    ModelResolution,
    Provider,
    ResolutionKind,
)

__all__ = [
    "BUILTIN_PROVIDERS",
    "PROVIDER_ALIASES",
    "resolve_provider_alias",
    "DiscoveryMode",
    "HealthCheckResult",
    "Model",
    "ModelResolution",
    "Provider",
    "ResolutionKind",
]
