# src/claude_mode/providers/health.py
"""Reachability probes against each provider's model endpoint."""

from __future__ import annotations

import asyncio
import logging
import time

import httpx

from claude_mode.config.config_store import ConfigStore
from claude_mode.errors import (
    HINT_FORBIDDEN,
    HINT_UNAUTHORIZED,
    ClassifiedError,
    ErrorCode,
    classify_error,
    provider_not_found_error,
)
from claude_mode.providers.http import fetch
from claude_mode.providers.models import HealthCheckResult
from claude_mode.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


def _status_error(status_code: int, reason: str) -> ClassifiedError:
    if status_code == 401:
        return ClassifiedError(
            code=ErrorCode.AUTH_INVALID,
            message="Authentication failed (HTTP 401)",
            hint=HINT_UNAUTHORIZED,
        )
    if status_code == 403:
        return ClassifiedError(
            code=ErrorCode.AUTH_INVALID,
            message="Access forbidden (HTTP 403)",
            hint=HINT_FORBIDDEN,
        )
    detail = f"HTTP {status_code}"
    if reason:
        detail = f"{detail} {reason}"
    return ClassifiedError(
        code=ErrorCode.PROVIDER_UNAVAILABLE,
        message=f"Provider returned {detail}",
        hint="The provider is reachable but not serving requests. Try again later.",
    )


class HealthChecker:
    """Probes providers; results are never cached."""

    def __init__(
        self,
        registry: ProviderRegistry,
        config_store: ConfigStore,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._registry = registry
        self._config_store = config_store
        self._transport = transport

    async def check_health(self, provider_key: str) -> HealthCheckResult:
        provider = self._registry.get_provider(provider_key)
        if provider is None:
            return HealthCheckResult(
                provider_key=provider_key,
                healthy=False,
                error=provider_not_found_error(
                    provider_key, self._registry.provider_keys()
                ),
            )

        timeout_ms = self._config_store.load().health_check_timeout
        url = provider.models_url()
        start = time.monotonic()
        try:
            response = await fetch(
                url, provider.auth_headers(), timeout_ms, transport=self._transport
            )
        except Exception as e:
            error = classify_error(e)
            logger.debug("Health check for %s failed: %s", provider.key, error.message)
            return HealthCheckResult(provider_key=provider.key, healthy=False, error=error)

        latency_ms = int((time.monotonic() - start) * 1000)
        if response.is_success:
            return HealthCheckResult(
                provider_key=provider.key, healthy=True, latency_ms=latency_ms
            )

        return HealthCheckResult(
            provider_key=provider.key,
            healthy=False,
            latency_ms=latency_ms,
            error=_status_error(response.status_code, response.reason_phrase),
        )

    async def check_all_providers(self) -> list[HealthCheckResult]:
        """Probe every registered provider concurrently, in registry order."""
        keys = self._registry.provider_keys()
        return list(await asyncio.gather(*(self.check_health(key) for key in keys)))
