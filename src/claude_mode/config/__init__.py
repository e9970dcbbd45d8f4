"""
Configuration for claude-mode.

Defaults, environment variable names, logging setup and the pydantic models
for ``claude-mode.json``. The file-backed stores live in
``claude_mode.config.config_store``.
"""

from claude_mode.config.env_vars import EnvVar, get_env, get_env_bool, get_env_first
from claude_mode.config.logging import setup_logging
from claude_mode.config.models import CustomProviderConfig, LauncherConfig

__all__ = [
    "EnvVar",
    "get_env",
    "get_env_bool",
    "get_env_first",
    "setup_logging",
    "CustomProviderConfig",
    "LauncherConfig",
]
