"""Pydantic configuration models for the launcher settings file."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from claude_mode.config.defaults import (
    DEFAULT_CACHE_TTL_MS,
    DEFAULT_HEADLESS_ALLOWED_TOOLS,
    DEFAULT_HEALTH_CHECK_TIMEOUT_MS,
    DEFAULT_MODEL_DISCOVERY_TIMEOUT_MS,
    DEFAULT_OFFLINE_MODE,
    DEFAULT_SKIP_HEALTH_CHECK,
)


class CustomProviderConfig(BaseModel):
    """A user-defined OpenAI-compatible provider from the config file."""

    key: str = Field(..., description="Unique provider key")
    name: str = Field(..., description="Display name")
    base_url: str = Field(..., alias="baseUrl", description="API base URL")
    auth_token: str | None = Field(
        None, alias="authToken", description="Literal auth token"
    )
    auth_env_var: str | None = Field(
        None,
        alias="authEnvVar",
        description="Environment variable holding the auth token",
    )
    description: str | None = Field(None, description="Shown in menus")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("key", "name", "base_url")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v.strip()


class LauncherConfig(BaseModel):
    """Complete contents of ``claude-mode.json``.

    Field names are snake_case in Python and camelCase on disk. Unknown keys
    are ignored so older or newer config files still load.
    """

    default_provider: str = Field("", alias="defaultProvider")
    default_model: str = Field("", alias="defaultModel")

    # Timeouts (in milliseconds)
    model_discovery_timeout: int = Field(
        DEFAULT_MODEL_DISCOVERY_TIMEOUT_MS, alias="modelDiscoveryTimeout", gt=0
    )
    health_check_timeout: int = Field(
        DEFAULT_HEALTH_CHECK_TIMEOUT_MS, alias="healthCheckTimeout", gt=0
    )
    cache_ttl: int = Field(DEFAULT_CACHE_TTL_MS, alias="cacheTTL", ge=0)

    custom_providers: list[CustomProviderConfig] = Field(
        default_factory=list, alias="customProviders"
    )

    # Feature flags
    skip_health_check: bool = Field(DEFAULT_SKIP_HEALTH_CHECK, alias="skipHealthCheck")
    offline_mode: bool = Field(DEFAULT_OFFLINE_MODE, alias="offlineMode")

    # Headless mode settings
    headless_allowed_tools: str = Field(
        DEFAULT_HEADLESS_ALLOWED_TOOLS, alias="headlessAllowedTools"
    )

    # Written by the setup wizard
    configured_providers: list[str] = Field(
        default_factory=list, alias="configuredProviders"
    )

    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", protected_namespaces=()
    )

    @property
    def discovery_timeout_seconds(self) -> float:
        return self.model_discovery_timeout / 1000

    @property
    def health_check_timeout_seconds(self) -> float:
        return self.health_check_timeout / 1000

    def to_file_dict(self) -> dict[str, Any]:
        """Serialize with on-disk (camelCase) key names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
