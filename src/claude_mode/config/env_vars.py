"""Environment variable names - centralized, type-safe, no magic strings!

All environment variable access should go through this module.
"""

from __future__ import annotations

import os
from enum import Enum


class EnvVar(str, Enum):
    """All environment variable names used by claude-mode.

    Use these instead of hardcoded strings for type safety.
    """

    # ================================================================
    # Values handed to the external agent
    # ================================================================
    ANTHROPIC_BASE_URL = "ANTHROPIC_BASE_URL"
    ANTHROPIC_AUTH_TOKEN = "ANTHROPIC_AUTH_TOKEN"
    ANTHROPIC_API_KEY = "ANTHROPIC_API_KEY"

    # ================================================================
    # OpenRouter
    # ================================================================
    OPEN_ROUTER_API_KEY = "OPEN_ROUTER_API_KEY"

    # ================================================================
    # Ollama
    # ================================================================
    OLLAMA_HOST = "OLLAMA_HOST"
    OLLAMA_API_KEY = "OLLAMA_API_KEY"
    OLLAMA_BASE_URL_LOCAL = "OLLAMA_BASE_URL_LOCAL"
    OLLAMA_BASE_URL_CUSTOM = "OLLAMA_BASE_URL_CUSTOM"

    # ================================================================
    # Launcher behaviour
    # ================================================================
    HOME_DIR = "CLAUDE_MODE_HOME"
    DEBUG = "DEBUG"


# ================================================================
# Type-Safe Helper Functions
# ================================================================


def get_env(var: EnvVar, default: str | None = None) -> str | None:
    """Get environment variable value (type-safe).

    Example:
        >>> base_url = get_env(EnvVar.OLLAMA_HOST, "https://ollama.com")
    """
    return os.getenv(var.value, default)


def get_env_first(*names: str, default: str = "") -> str:
    """Return the first non-empty value among several variable names.

    Empty strings count as unset, so ``ANTHROPIC_AUTH_TOKEN=`` falls through
    to the next name in the chain.
    """
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


def set_env(var: EnvVar, value: str) -> None:
    """Set environment variable (type-safe)."""
    os.environ[var.value] = value


def get_env_bool(var: EnvVar, default: bool = False) -> bool:
    """Get environment variable as boolean.

    Returns:
        Boolean value (true for "1", "true", "yes", "on", case-insensitive)
    """
    value = get_env(var)
    if value is None:
        return default

    return value.lower() in ("1", "true", "yes", "on")
