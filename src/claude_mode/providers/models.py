# src/claude_mode/providers/models.py
"""
Provider and model data types.

Pydantic models for providers, models, cache entries, health results and
model resolution outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from claude_mode.config.defaults import MODELS_ENDPOINT
from claude_mode.config.env_vars import get_env_first
from claude_mode.errors import ClassifiedError


class DiscoveryMode(str, Enum):
    """How a provider's model list is obtained."""

    STATIC = "static"  # Fixed list shipped with the launcher
    DYNAMIC_API = "dynamic_api"  # GET {base_url}/v1/models


class Model(BaseModel):
    """A model offered by a provider.

    ``id`` is what the external agent receives; ``name`` and ``shortcut``
    only exist to look the model up.
    """

    id: str = Field(..., description="Provider-native model identifier")
    name: str = Field(..., description="Display name")
    shortcut: str = Field(..., description="Short user-facing alias")

    model_config = {"frozen": True}

    @classmethod
    def from_discovered(cls, model_id: str) -> Model:
        """Discovered models carry no alias: id, name and shortcut are equal."""
        return cls(id=model_id, name=model_id, shortcut=model_id)


class Provider(BaseModel):
    """
    A named backend (API endpoint + credentials).

    Base URL and token are looked up lazily so that environment changes
    (for example from a freshly written .env file) are picked up.
    """

    key: str
    name: str
    description: str = ""
    discovery_mode: DiscoveryMode = DiscoveryMode.STATIC
    is_built_in: bool = True

    # Env vars checked in order, then the default
    base_url_env: tuple[str, ...] = ()
    default_base_url: str = ""
    auth_token_env: tuple[str, ...] = ()
    default_auth_token: str = ""

    # Only meaningful for DiscoveryMode.STATIC
    models: tuple[Model, ...] = ()

    model_config = {"frozen": True}

    def get_base_url(self) -> str:
        return get_env_first(*self.base_url_env, default=self.default_base_url)

    def get_auth_token(self) -> str:
        return get_env_first(*self.auth_token_env, default=self.default_auth_token)

    def get_description(self) -> str:
        return self.description or f"{self.name} ({self.get_base_url()})"

    @property
    def is_dynamic(self) -> bool:
        return self.discovery_mode is DiscoveryMode.DYNAMIC_API

    def models_url(self) -> str:
        """URL of the model listing endpoint, without doubling ``/v1``."""
        base_url = self.get_base_url().rstrip("/")
        if base_url.endswith("/v1"):
            return f"{base_url}/models"
        return f"{base_url}{MODELS_ENDPOINT}"

    def auth_headers(self) -> dict[str, str]:
        """Bearer header, or nothing when no token is configured."""
        token = self.get_auth_token()
        return {"Authorization": f"Bearer {token}"} if token else {}


class ModelCacheEntry(BaseModel):
    """One provider's entry in the on-disk model cache."""

    models: list[Model] = Field(default_factory=list)
    timestamp: float = Field(..., description="Epoch milliseconds of the fetch")


@dataclass(frozen=True)
class HealthCheckResult:
    """Outcome of a single provider probe. Produced fresh on every check."""

    provider_key: str
    healthy: bool
    latency_ms: int | None = None
    error: ClassifiedError | None = None


class ResolutionKind(str, Enum):
    """Whether a model lookup found a known model."""

    RESOLVED = "resolved"
    PASS_THROUGH = "pass_through"


class ModelResolution(BaseModel):
    """
    Result of resolving a model shortcut.

    PASS_THROUGH keeps the user's input as the model id so raw
    provider-native identifiers still work.
    """

    kind: ResolutionKind
    model_id: str
    requested: str
    model: Model | None = None

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    @classmethod
    def resolved(cls, model: Model, requested: str) -> ModelResolution:
        return cls(
            kind=ResolutionKind.RESOLVED,
            model_id=model.id,
            requested=requested,
            model=model,
        )

    @classmethod
    def pass_through(cls, requested: str) -> ModelResolution:
        return cls(
            kind=ResolutionKind.PASS_THROUGH, model_id=requested, requested=requested
        )

    @property
    def is_resolved(self) -> bool:
        return self.kind is ResolutionKind.RESOLVED
