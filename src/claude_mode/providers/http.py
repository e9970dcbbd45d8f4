# src/claude_mode/providers/http.py
"""
Single-shot GET against a provider's model endpoint with a hard deadline.

The request races an ``asyncio.wait_for`` deadline; when the deadline wins
the request is cancelled and the client is closed by its ``async with``.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

logger = logging.getLogger(__name__)


class RequestTimeoutError(TimeoutError):
    """The deadline expired before the provider answered."""

    def __init__(self, url: str, timeout_ms: int):
        super().__init__(f"Request timed out after {timeout_ms}ms")
        self.url = url
        self.timeout_ms = timeout_ms


class HTTPStatusError(Exception):
    """Non-2xx response. The message is ``HTTP <status>: <reason>``; the URL is an attribute."""

    def __init__(self, url: str, status_code: int, reason: str = ""):
        message = f"HTTP {status_code}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.url = url
        self.status_code = status_code


async def fetch(
    url: str,
    headers: dict[str, str],
    timeout_ms: int,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.Response:
    """
    GET *url*, giving up after *timeout_ms*.

    Returns the response whatever its status. Transport failures propagate
    as raised by httpx, except timeouts which become ``RequestTimeoutError``.
    """
    timeout_s = timeout_ms / 1000
    try:
        async with httpx.AsyncClient(
            transport=transport, timeout=timeout_s, headers=headers
        ) as client:
            return await asyncio.wait_for(client.get(url), timeout=timeout_s)
    except (asyncio.TimeoutError, httpx.TimeoutException) as e:
        logger.debug("GET %s exceeded %dms", url, timeout_ms)
        raise RequestTimeoutError(url, timeout_ms) from e


async def fetch_json(
    url: str,
    headers: dict[str, str],
    timeout_ms: int,
    transport: httpx.AsyncBaseTransport | None = None,
) -> object:
    """GET and decode JSON, raising ``HTTPStatusError`` on non-2xx."""
    response = await fetch(url, headers, timeout_ms, transport=transport)
    if not response.is_success:
        raise HTTPStatusError(url, response.status_code, response.reason_phrase)
    return response.json()
