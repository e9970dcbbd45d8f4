# src/claude_mode/launcher.py
"""
Spawning the external ``claude`` agent.

The agent talks to the chosen provider through the Anthropic-compatible
variables set here; ``ANTHROPIC_API_KEY`` is blanked so a key from the
user's shell cannot take precedence over the provider token.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil

from claude_mode.config.defaults import CLAUDE_BINARY
from claude_mode.config.env_vars import EnvVar
from claude_mode.errors import (
    ClaudeModeError,
    claude_failed_error,
    claude_not_found_error,
)
from claude_mode.providers.models import Provider

logger = logging.getLogger(__name__)


def is_claude_installed() -> bool:
    return shutil.which(CLAUDE_BINARY) is not None


def build_env(provider: Provider, base: dict[str, str] | None = None) -> dict[str, str]:
    """Inherited environment plus the provider's connection settings."""
    env = dict(os.environ if base is None else base)
    env[EnvVar.ANTHROPIC_BASE_URL.value] = provider.get_base_url()
    env[EnvVar.ANTHROPIC_AUTH_TOKEN.value] = provider.get_auth_token()
    env[EnvVar.ANTHROPIC_API_KEY.value] = ""
    return env


def build_args(
    model_id: str,
    skip_permissions: bool = False,
    prompt: str | None = None,
    allowed_tools: str | None = None,
) -> list[str]:
    """Command-line arguments for ``claude`` (binary name excluded)."""
    args = ["--model", model_id]
    if skip_permissions:
        args.append("--dangerously-skip-permissions")
    if prompt:
        args.extend(["-p", prompt])
        if allowed_tools:
            args.extend(["--allowedTools", allowed_tools])
    return args


async def run_claude(
    provider: Provider,
    model_id: str,
    skip_permissions: bool = False,
    prompt: str | None = None,
    allowed_tools: str | None = None,
) -> int:
    """
    Run ``claude`` with inherited stdio and wait for it to exit.

    Returns 0 on success. Raises ``ClaudeModeError`` when the binary is
    missing (checked before spawning) or exits non-zero.
    """
    executable = shutil.which(CLAUDE_BINARY)
    if executable is None:
        raise ClaudeModeError(claude_not_found_error())

    args = build_args(model_id, skip_permissions, prompt, allowed_tools)
    logger.debug("Launching %s %s", CLAUDE_BINARY, " ".join(args))

    process = await asyncio.create_subprocess_exec(
        executable, *args, env=build_env(provider)
    )
    returncode = await process.wait()

    if returncode != 0:
        raise ClaudeModeError(claude_failed_error(returncode))
    return 0
