# src/claude_mode/setup.py
"""
Interactive setup wizard (``claude-mode setup``).

Steps: detect status → welcome → pick providers → collect keys / URLs →
validate with the health checker → choose defaults → review → save config
and ``~/.claude-mode/.env``.

The file helpers at the bottom (``build_env_vars``, ``format_env_file``,
``merge_env_file`` ...) do no prompting and are used directly by tests.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

import httpx
from chuk_term.ui import ask, confirm, output, select_from_list, select_multiple
from dotenv import dotenv_values
from rich.prompt import Prompt

from claude_mode.config.defaults import APP_NAME
from claude_mode.config.env_vars import EnvVar, set_env
from claude_mode.context import ApplicationContext
from claude_mode.errors import (
    ClaudeModeError,
    setup_cancelled_error,
    setup_incomplete_error,
    setup_write_error,
)
from claude_mode.providers.builtin import (
    OLLAMA_CLOUD,
    OLLAMA_CLOUD_BASE_URL,
    OLLAMA_CUSTOM,
    OLLAMA_LOCAL,
    OLLAMA_LOCAL_BASE_URL,
    OPENROUTER,
    OPENROUTER_BASE_URL,
    PROVIDER_KEY_ENV,
)

logger = logging.getLogger(__name__)

# Keys with this prefix are internal markers and never written back
INTERNAL_KEY_PREFIX = "_claude_mode_"


class SetupStatus(str, Enum):
    FIRST_TIME = "first-time"
    INCOMPLETE = "incomplete"
    COMPLETE = "complete"


@dataclass
class ProviderSetupConfig:
    """What the wizard collected for one provider."""

    key: str
    name: str
    api_key: str | None = None
    custom_url: str | None = None
    validated: bool = False


@dataclass(frozen=True)
class SetupDefaults:
    provider: str
    model: str


# ── Status detection ─────────────────────────────────────────────────────────


def detect_setup_status(ctx: ApplicationContext) -> SetupStatus:
    """
    ``first-time`` without a config file; ``incomplete`` when defaults or
    configured providers are missing, or a configured provider that needs an
    API key has none; ``complete`` otherwise.
    """
    if not ctx.config_store.config_file.exists():
        return SetupStatus.FIRST_TIME

    config = ctx.config_store.load()
    if not (config.default_provider and config.default_model):
        return SetupStatus.INCOMPLETE
    if not config.configured_providers:
        return SetupStatus.INCOMPLETE

    for key in config.configured_providers:
        provider = ctx.registry.get_provider(key)
        if provider and key in PROVIDER_KEY_ENV and not provider.get_auth_token():
            return SetupStatus.INCOMPLETE

    return SetupStatus.COMPLETE


# ── Helpers ──────────────────────────────────────────────────────────────────


def mask_secret(value: str) -> str:
    if len(value) <= 12:
        return value[:4] + "..."
    return f"{value[:8]}...{value[-4:]}"


def is_valid_url(value: str) -> bool:
    try:
        url = httpx.URL(value)
    except (httpx.InvalidURL, TypeError, ValueError):
        return False
    return url.scheme in ("http", "https") and bool(url.host)


def _print_provider_info() -> None:
    output.print("[bold]Available Providers:[/bold]")
    output.print("  [green]OpenRouter[/green] - Access to Claude, GPT-5, DeepSeek, and more")
    output.print("    [dim]Requires: API key[/dim]")
    output.print("  [green]Ollama Local[/green] - Run models locally on your machine")
    output.print("    [dim]Requires: Local Ollama instance[/dim]")
    output.print("  [green]Ollama Cloud[/green] - Managed Ollama service")
    output.print("    [dim]Requires: API key[/dim]")
    output.print("  [green]Ollama Custom[/green] - Connect to remote Ollama instance")
    output.print("    [dim]Requires: Custom URL[/dim]")
    output.print()


# ── Wizard steps ─────────────────────────────────────────────────────────────


def display_welcome(is_first_time: bool) -> None:
    if is_first_time:
        output.rule("Welcome to Claude Mode Setup")
        output.print(
            "[bold cyan]Claude Mode[/bold cyan] is a CLI launcher for Claude Code "
            "that supports multiple AI providers."
        )
        output.print("This wizard configures your providers and default settings.")
    else:
        output.rule("Claude Mode Configuration")
        output.print("Update your configuration or add new providers.")
    output.print()
    _print_provider_info()

    if not confirm("Ready to configure?", default=True):
        raise ClaudeModeError(setup_cancelled_error())


UPDATE_FULL = "Re-run full setup"
UPDATE_SINGLE = "Configure specific provider"
UPDATE_SKIP = "Skip (use existing config)"


def prompt_update_action() -> str:
    """Ask what to do when a configuration already exists."""
    output.rule("Configuration Found")
    output.print("A configuration file already exists.")
    return select_from_list(
        "What would you like to do?", [UPDATE_FULL, UPDATE_SINGLE, UPDATE_SKIP]
    )


def select_providers(ctx: ApplicationContext, force_provider: str | None = None) -> list[str]:
    if force_provider:
        provider = ctx.registry.get_provider(force_provider)
        if provider is None:
            raise ClaudeModeError(
                setup_incomplete_error(f'Provider "{force_provider}" not found')
            )
        return [provider.key]

    providers = ctx.registry.get_providers()
    labels = {f"{p.name} - {p.get_description()}": key for key, p in providers.items()}

    while True:
        chosen = select_multiple("Select providers to configure:", list(labels))
        if chosen:
            return [labels[label] for label in chosen]
        output.warning("Select at least one provider")


def configure_provider(ctx: ApplicationContext, provider_key: str) -> ProviderSetupConfig:
    """Collect credentials for one provider and export them for validation."""
    provider = ctx.registry.get_provider(provider_key)
    if provider is None:
        raise ClaudeModeError(
            setup_incomplete_error(f'Provider "{provider_key}" not found')
        )

    output.rule(f"Configuring {provider.name}")
    setup = ProviderSetupConfig(key=provider.key, name=provider.name)

    if provider.key in PROVIDER_KEY_ENV:
        existing = provider.get_auth_token()
        message = (
            f"Enter API key (current: {existing[:8]}..., Enter to keep)"
            if existing
            else "Enter API key"
        )
        while True:
            value = Prompt.ask(message, password=True, default="", show_default=False)
            if value or existing:
                break
            output.warning("API key is required")

        if value:
            setup.api_key = value
            if provider.key == OPENROUTER:
                set_env(EnvVar.ANTHROPIC_AUTH_TOKEN, value)
            else:
                set_env(EnvVar.OLLAMA_API_KEY, value)

    if provider.key == OLLAMA_CUSTOM:
        existing_url = provider.get_base_url()
        while True:
            url = ask("Enter Ollama URL", default=existing_url or None)
            if url and is_valid_url(url):
                break
            output.warning("Please enter a valid URL")
        setup.custom_url = url
        set_env(EnvVar.OLLAMA_BASE_URL_CUSTOM, url)

    return setup


async def validate_provider(ctx: ApplicationContext, provider_key: str) -> bool:
    """Health-check a provider; on failure the user may keep it anyway."""
    output.info("Validating provider connection...")
    result = await ctx.health_checker.check_health(provider_key)

    if result.healthy:
        latency = f" ({result.latency_ms}ms)" if result.latency_ms is not None else ""
        output.success(f"{provider_key} is reachable{latency}")
        return True

    output.warning(f"{provider_key} validation failed")
    if result.error:
        output.print(f"  [dim]{result.error.message}[/dim]")
    return confirm("Continue anyway?", default=False)


async def select_defaults(
    ctx: ApplicationContext,
    configured: list[str],
    current: SetupDefaults | None = None,
) -> SetupDefaults:
    output.rule("Set Defaults")

    def provider_label(key: str) -> str:
        provider = ctx.registry.get_provider(key)
        return f"{provider.name} ({key})" if provider else key

    if (
        current
        and current.provider in configured
        and confirm(f"Keep default provider as {current.provider}?", default=True)
    ):
        default_provider = current.provider
    elif len(configured) == 1:
        default_provider = configured[0]
    else:
        labels = {provider_label(key): key for key in configured}
        default_provider = labels[
            select_from_list("Select default provider:", list(labels))
        ]

    models = await ctx.discovery.get_models(default_provider)
    if not models:
        output.print("  [dim](no models found - enter a model id manually)[/dim]")
        while True:
            default_model = ask("Enter default model ID")
            if default_model:
                break
            output.warning("Model ID cannot be empty")
    else:
        for model in models:
            output.print(f"  [green]{model.shortcut:<20}[/green] [dim]{model.id}[/dim]")
        labels = {f"{m.name} ({m.shortcut})": m.id for m in models}
        default_model = labels[select_from_list("Select default model:", list(labels))]

    return SetupDefaults(provider=default_provider, model=default_model)


def review_and_confirm(
    ctx: ApplicationContext,
    provider_configs: list[ProviderSetupConfig],
    defaults: SetupDefaults,
) -> bool:
    output.rule("Review Configuration")
    output.print("[bold]Configured Providers:[/bold]")
    for cfg in provider_configs:
        output.print(f"  [cyan]{cfg.name} ({cfg.key})[/cyan]")
        if cfg.api_key:
            output.print(f"    API Key: [dim]{mask_secret(cfg.api_key)}[/dim]")
        if cfg.custom_url:
            output.print(f"    URL: [dim]{cfg.custom_url}[/dim]")
        status = "[green]✓ Validated[/green]" if cfg.validated else "[yellow]⚠ Not validated[/yellow]"
        output.print(f"    Status: {status}")

    output.print()
    output.print("[bold]Defaults:[/bold]")
    output.print(f"  Provider: {defaults.provider}")
    output.print(f"  Model: {defaults.model}")
    output.print()
    output.print("[bold]Files to be created/updated:[/bold]")
    output.print(f"  Config: {ctx.config_store.config_file}")
    output.print(f"  Env: {ctx.config_store.env_file}")

    return confirm("Save this configuration?", default=True)


def display_success(
    ctx: ApplicationContext,
    provider_configs: list[ProviderSetupConfig],
    defaults: SetupDefaults,
) -> None:
    output.rule("Setup Complete!")
    output.success("Configuration saved successfully!")

    output.print("[bold]Configured Providers:[/bold]")
    for cfg in provider_configs:
        mark = "[green]✓[/green]" if cfg.validated else "[yellow]⚠[/yellow]"
        output.print(f"  {mark} {cfg.name}")

    output.print()
    output.print(f"Default provider: [cyan]{defaults.provider}[/cyan]")
    output.print(f"Default model: [cyan]{defaults.model}[/cyan]")
    output.print()
    output.hint(f"Run '{APP_NAME}' to start Claude Code")
    output.hint(f"Run '{APP_NAME} --list' to see all available models")
    output.hint(f"Run '{APP_NAME} -p \"your prompt\"' for headless mode")


async def run_setup(
    ctx: ApplicationContext,
    force: bool = False,
    provider: str | None = None,
    skip_validation: bool = False,
) -> bool:
    """
    Run the wizard. Returns False when the user keeps the existing config.

    Raises ``ClaudeModeError`` with a SETUP_* code on cancellation or failure.
    """
    status = detect_setup_status(ctx)
    is_first_time = status is SetupStatus.FIRST_TIME
    logger.debug("Setup status: %s", status.value)

    if not force and not is_first_time:
        action = prompt_update_action()
        if action == UPDATE_SKIP:
            return False
        if action == UPDATE_SINGLE and not provider:
            labels = {p.name: key for key, p in ctx.registry.get_providers().items()}
            provider = labels[select_from_list("Select provider:", list(labels))]

    display_welcome(is_first_time)
    provider_keys = select_providers(ctx, provider)
    current_config = ctx.config_store.load()

    provider_configs: list[ProviderSetupConfig] = []
    for key in provider_keys:
        try:
            cfg = configure_provider(ctx, key)
            cfg.validated = True if skip_validation else await validate_provider(ctx, key)
        except ClaudeModeError as e:
            output.warning(f"Failed to configure {key}: {e.error.message}")
            if not confirm("Continue with remaining providers?", default=True):
                raise ClaudeModeError(setup_cancelled_error()) from e
            continue
        provider_configs.append(cfg)

    if not provider_configs:
        raise ClaudeModeError(setup_incomplete_error("No providers were configured"))

    current = None
    if current_config.default_provider and current_config.default_model:
        current = SetupDefaults(
            provider=current_config.default_provider,
            model=current_config.default_model,
        )

    defaults = await select_defaults(ctx, [c.key for c in provider_configs], current)
    if not review_and_confirm(ctx, provider_configs, defaults):
        raise ClaudeModeError(setup_cancelled_error())

    output.info("Saving configuration...")
    save_configuration(ctx, provider_configs, defaults)
    ctx.reload()
    display_success(ctx, provider_configs, defaults)
    return True


# ── Config and .env files ────────────────────────────────────────────────────


def build_env_vars(provider_configs: list[ProviderSetupConfig]) -> dict[str, str]:
    """Environment variables to persist for the collected provider settings."""
    env_vars: dict[str, str] = {}
    for cfg in provider_configs:
        if cfg.key == OPENROUTER and cfg.api_key:
            env_vars[EnvVar.ANTHROPIC_BASE_URL.value] = OPENROUTER_BASE_URL
            env_vars[EnvVar.ANTHROPIC_AUTH_TOKEN.value] = cfg.api_key
            env_vars[EnvVar.OPEN_ROUTER_API_KEY.value] = cfg.api_key
        elif cfg.key == OLLAMA_CLOUD and cfg.api_key:
            env_vars[EnvVar.OLLAMA_HOST.value] = OLLAMA_CLOUD_BASE_URL
            env_vars[EnvVar.OLLAMA_API_KEY.value] = cfg.api_key
        elif cfg.key == OLLAMA_LOCAL:
            env_vars[EnvVar.OLLAMA_BASE_URL_LOCAL.value] = OLLAMA_LOCAL_BASE_URL
        elif cfg.key == OLLAMA_CUSTOM and cfg.custom_url and cfg.custom_url.strip():
            env_vars[EnvVar.OLLAMA_BASE_URL_CUSTOM.value] = cfg.custom_url.strip()
    return env_vars


_ENV_SECTIONS: list[tuple[str, list[EnvVar]]] = [
    (
        "OpenRouter",
        [EnvVar.ANTHROPIC_BASE_URL, EnvVar.ANTHROPIC_AUTH_TOKEN, EnvVar.OPEN_ROUTER_API_KEY],
    ),
    ("Ollama Cloud", [EnvVar.OLLAMA_HOST, EnvVar.OLLAMA_API_KEY]),
    ("Ollama Local", [EnvVar.OLLAMA_BASE_URL_LOCAL]),
    ("Ollama Custom", [EnvVar.OLLAMA_BASE_URL_CUSTOM]),
]


def _env_header(now: datetime | None = None) -> list[str]:
    stamp = (now or datetime.now(timezone.utc)).isoformat()
    return [
        f"# {APP_NAME} configuration",
        f"# Generated by: {APP_NAME} setup",
        f"# Date: {stamp}",
        "",
    ]


# Characters dotenv would treat as a comment, quote or escape in a bare value
_NEEDS_QUOTES = re.compile(r"[\s#'\"\\]")


def _env_line(key: str, value: str) -> str:
    """``KEY=value``, single-quoted with ``\\`` and ``'`` escaped when needed."""
    if _NEEDS_QUOTES.search(value):
        value = "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"
    return f"{key}={value}"


def format_env_file(env_vars: dict[str, str], now: datetime | None = None) -> str:
    """Render a fresh ``.env`` with one commented section per provider."""
    lines = _env_header(now)
    known: set[str] = set()
    for title, variables in _ENV_SECTIONS:
        names = [var.value for var in variables]
        known.update(names)
        present = [name for name in names if env_vars.get(name)]
        if not present:
            continue
        lines.append(f"# {title}")
        lines.extend(_env_line(name, env_vars[name]) for name in present)
        lines.append("")

    extra = [name for name in env_vars if name not in known]
    if extra:
        lines.append("# Other")
        lines.extend(_env_line(name, env_vars[name]) for name in extra)
        lines.append("")

    return "\n".join(lines)


def load_env_file(path: Path) -> dict[str, str]:
    """Parse an env file; a missing or unreadable file yields ``{}``."""
    if not path.exists():
        return {}
    try:
        values = dotenv_values(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return {}
    return {key: value for key, value in values.items() if value is not None}


def _write_text(path: Path, content: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ClaudeModeError(setup_write_error(str(path), e)) from e


def save_env_file(env_vars: dict[str, str], path: Path, now: datetime | None = None) -> None:
    _write_text(path, format_env_file(env_vars, now) + "\n")


def merge_env_file(env_vars: dict[str, str], path: Path, now: datetime | None = None) -> None:
    """Merge into an existing env file; new values win, existing keys are kept."""
    merged = {**load_env_file(path), **env_vars}
    lines = _env_header(now)
    lines.extend(
        _env_line(key, value)
        for key, value in merged.items()
        if not key.startswith(INTERNAL_KEY_PREFIX)
    )
    _write_text(path, "\n".join(lines) + "\n")


def save_configuration(
    ctx: ApplicationContext,
    provider_configs: list[ProviderSetupConfig],
    defaults: SetupDefaults,
) -> None:
    """Persist defaults and configured providers, then write or merge the env file."""
    store = ctx.config_store
    config = store.load().model_copy(
        update={
            "default_provider": defaults.provider,
            "default_model": defaults.model,
            "configured_providers": [cfg.key for cfg in provider_configs],
        }
    )
    try:
        store.save(config)
    except OSError as e:
        raise ClaudeModeError(setup_write_error(str(store.config_file), e)) from e

    env_vars = build_env_vars(provider_configs)
    if store.env_file.exists():
        merge_env_file(env_vars, store.env_file)
    else:
        save_env_file(env_vars, store.env_file)
