"""Default configuration values - no more magic numbers!

All default values should be defined here, not hardcoded in the code.
Timeouts and TTLs are in milliseconds, matching the on-disk config file.
"""

from __future__ import annotations


# ================================================================
# Timeout Defaults (in milliseconds)
# ================================================================

DEFAULT_MODEL_DISCOVERY_TIMEOUT_MS = 5000
"""Timeout for fetching a provider's model list."""

DEFAULT_HEALTH_CHECK_TIMEOUT_MS = 2000
"""Timeout for a single provider liveness probe."""

DEFAULT_CACHE_TTL_MS = 30000
"""How long discovered models stay fresh in memory."""


# ================================================================
# Feature Defaults
# ================================================================

DEFAULT_SKIP_HEALTH_CHECK = False
"""Default: run health checks before the interactive menu."""

DEFAULT_OFFLINE_MODE = False
"""Default: discovery may use the network."""

DEFAULT_HEADLESS_ALLOWED_TOOLS = "Read,Edit,Write,Bash,Glob,Grep"
"""Tools pre-approved in headless mode (empty string disables the flag)."""


# ================================================================
# Path Defaults
# ================================================================

CONFIG_DIR_NAME = ".claude-mode"
"""Directory under the user's home holding all launcher state."""

CONFIG_FILENAME = "claude-mode.json"
"""Settings file name."""

CACHE_DIR_NAME = "cache"
"""Sub-directory for cached data."""

MODEL_CACHE_FILENAME = "models.json"
"""Model cache file name (inside the cache directory)."""

ENV_FILENAME = ".env"
"""Env file written by the setup wizard."""


# ================================================================
# Logging Defaults
# ================================================================

DEFAULT_LOG_LEVEL = "WARNING"
"""Default console log level."""

DEFAULT_LOG_MAX_BYTES = 5 * 1024 * 1024
"""Rotate file logs after this many bytes."""

DEFAULT_LOG_BACKUP_COUNT = 3
"""Number of rotated log files to keep."""


# ================================================================
# External Agent
# ================================================================

CLAUDE_BINARY = "claude"
"""Name of the external coding-agent executable."""

CLAUDE_INSTALL_HINT = "npm install -g @anthropic-ai/claude-code"
"""How to install the external agent."""


# ================================================================
# Application Constants
# ================================================================

APP_NAME = "claude-mode"
"""Application name (also the console script name)."""

MODELS_ENDPOINT = "/v1/models"
"""OpenAI-compatible model listing path."""
