# src/claude_mode/commands/launch.py
"""
Default command: pick provider, model and mode, then start ``claude``.

Quick mode takes everything from the command line; interactive mode walks
through menus. Both end in ``launcher.run_claude``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import typer
from chuk_term.ui import ask, clear_screen, output, select_from_list

from claude_mode.context import ApplicationContext
from claude_mode.commands.health import print_health_results
from claude_mode.errors import (
    ClaudeModeError,
    auth_missing_error,
    model_not_found_error,
    provider_not_found_error,
)
from claude_mode.launcher import run_claude
from claude_mode.providers.builtin import PROVIDER_KEY_ENV
from claude_mode.providers.models import Provider

logger = logging.getLogger(__name__)

# Mode aliases; True means headless
MODE_ALIASES: dict[str, bool] = {
    "terminal": False,
    "t": False,
    "interactive": False,
    "i": False,
    "headless": True,
    "h": True,
    "prompt": True,
    "p": True,
}

MODE_TERMINAL = "Terminal (interactive)"
MODE_HEADLESS = "Headless (single prompt)"
PERMISSIONS_ASK = "No (ask for permission)"
PERMISSIONS_SKIP = "Yes (skip all prompts)"


@dataclass(frozen=True)
class LaunchMode:
    headless: bool
    prompt: str | None = None


def parse_mode(mode: str | None, prompt: str | None = None) -> LaunchMode:
    """
    Interpret the MODE positional.

    A known alias selects the mode; any other text is itself the prompt for
    a headless run.
    """
    if not mode:
        return LaunchMode(headless=False, prompt=prompt)
    if mode in MODE_ALIASES:
        return LaunchMode(headless=MODE_ALIASES[mode], prompt=prompt)
    return LaunchMode(headless=True, prompt=mode)


def ask_non_empty(message: str, error: str) -> str:
    while True:
        value = ask(message)
        if value and value.strip():
            return value.strip()
        output.warning(error)


def print_launch_config(provider: Provider, model_id: str, headless: bool) -> None:
    output.print(f"[cyan]Provider:[/cyan] {provider.name}")
    output.print(f"[cyan]Model:[/cyan] {model_id}")
    output.print(f"[cyan]Base URL:[/cyan] {provider.get_base_url()}")
    output.print(f"[cyan]Mode:[/cyan] {'Headless' if headless else 'Interactive'}")
    output.print()


async def _launch(
    ctx: ApplicationContext,
    provider: Provider,
    model_id: str,
    headless: bool,
    skip_permissions: bool,
    prompt: str | None,
) -> None:
    allowed_tools = ctx.config.headless_allowed_tools if headless else None
    await run_claude(
        provider,
        model_id,
        skip_permissions=skip_permissions,
        prompt=prompt if headless else None,
        allowed_tools=allowed_tools or None,
    )


async def quick_mode(
    ctx: ApplicationContext,
    provider_arg: str,
    model_arg: str,
    skip_permissions: bool = False,
    mode_arg: str | None = None,
    prompt_arg: str | None = None,
) -> None:
    """Resolve everything from arguments and launch without menus."""
    provider = ctx.registry.get_provider(provider_arg)
    if provider is None:
        raise ClaudeModeError(
            provider_not_found_error(provider_arg, ctx.registry.provider_keys())
        )

    if provider.key in PROVIDER_KEY_ENV and not provider.get_auth_token():
        missing = auth_missing_error(provider.name, PROVIDER_KEY_ENV[provider.key].value)
        output.warning(missing.message)
        output.hint(missing.hint)

    resolution = await ctx.resolver.resolve_model(provider.key, model_arg)
    if not resolution.is_resolved:
        error = ctx.discovery.last_error(provider.key)
        if error is not None:
            output.warning(f"Could not list models for {provider.name}: {error.message}")
        elif not provider.is_dynamic:
            unknown = model_not_found_error(model_arg, provider.key)
            output.warning(f"{unknown.message}, passing it through as a model id")
            output.hint(unknown.hint)
        logger.info("Using %r as a raw model id for %s", model_arg, provider.key)

    mode = parse_mode(mode_arg, prompt_arg)
    prompt = mode.prompt
    if mode.headless and not prompt:
        prompt = ask_non_empty("Enter your prompt", "Prompt cannot be empty")

    print_launch_config(provider, resolution.model_id, mode.headless)
    await _launch(ctx, provider, resolution.model_id, mode.headless, skip_permissions, prompt)


async def interactive_mode(ctx: ApplicationContext, skip_permissions: bool = False) -> None:
    """Menu-driven launch: health check, provider, model, mode, permissions."""
    clear_screen()
    output.rule("Claude Mode")

    config = ctx.config
    if not (config.skip_health_check or config.offline_mode):
        output.info("Checking provider availability...")
        results = await ctx.health_checker.check_all_providers()
        print_health_results(ctx, results)

    providers = ctx.registry.get_providers()
    provider_labels = {
        f"{p.name} - {p.get_description()}": key for key, p in providers.items()
    }
    choice = select_from_list("Select Provider:", list(provider_labels))
    provider = providers[provider_labels[choice]]
    output.print(f"[yellow]→ Selected:[/yellow] {provider.name}")

    models = await ctx.discovery.get_models(provider.key)
    if not models:
        output.warning("No models available for this provider.")
        error = ctx.discovery.last_error(provider.key)
        if error is not None:
            output.print(f"  [dim]{error.message}[/dim]")
        output.hint("You can enter a model ID manually.")
        model_id = ask_non_empty("Enter model ID", "Model ID cannot be empty")
        output.print(f"[yellow]→ Model:[/yellow] {model_id}")
    else:
        model_labels = {f"{m.name} ({m.shortcut})": m for m in models}
        model = model_labels[select_from_list("Select Model:", list(model_labels))]
        model_id = model.id
        output.print(f"[yellow]→ Selected:[/yellow] {model.name} ({model_id})")

    headless = select_from_list("Select Mode:", [MODE_TERMINAL, MODE_HEADLESS]) == MODE_HEADLESS
    prompt = None
    if headless:
        prompt = ask_non_empty("Enter your prompt", "Prompt cannot be empty")

    if not skip_permissions:
        answer = select_from_list(
            "Skip permission prompts when executing commands?",
            [PERMISSIONS_ASK, PERMISSIONS_SKIP],
        )
        skip_permissions = answer == PERMISSIONS_SKIP
    status = "[red]Yes (auto-approve)[/red]" if skip_permissions else "[green]No (ask)[/green]"
    output.print(f"[yellow]→ Skip permissions:[/yellow] {status}")

    output.rule(
        "Executing Claude Code (Headless)" if headless else "Launching Claude Code (Interactive)"
    )
    print_launch_config(provider, model_id, headless)
    await _launch(ctx, provider, model_id, headless, skip_permissions, prompt)


async def launch_action(
    ctx: ApplicationContext,
    provider: str | None = None,
    model: str | None = None,
    mode: str | None = None,
    prompt_arg: str | None = None,
    prompt_option: str | None = None,
    skip_permissions: bool = False,
) -> None:
    """
    Route the default command.

    ``-p`` runs headless with the configured defaults filling in missing
    arguments; a provider without a model falls back to ``defaultModel``; no
    arguments at all opens the interactive menu.
    """
    config = ctx.config

    if prompt_option:
        effective_provider = provider or config.default_provider
        effective_model = model or config.default_model
        if not effective_provider or not effective_model:
            output.error("Provider and model are required")
            if not effective_provider and not effective_model:
                output.hint("Set defaults in config: claude-mode config init")
                output.hint(
                    "Then edit ~/.claude-mode/claude-mode.json to set "
                    "defaultProvider and defaultModel"
                )
            elif not effective_provider:
                output.hint(
                    "Missing: provider (set defaultProvider in config or pass as argument)"
                )
            else:
                output.hint("Missing: model (set defaultModel in config or pass as argument)")
            raise typer.Exit(1)

        await quick_mode(
            ctx, effective_provider, effective_model, skip_permissions, "headless", prompt_option
        )
        return

    if not provider:
        await interactive_mode(ctx, skip_permissions)
        return

    if not model:
        if not config.default_model:
            output.error("Model is required when provider is specified")
            output.hint("Usage: claude-mode <provider> <model> [mode] [prompt]")
            output.hint("Or set defaultModel in ~/.claude-mode/claude-mode.json")
            output.hint("Run claude-mode --list to see available models")
            raise typer.Exit(1)
        model = config.default_model

    await quick_mode(ctx, provider, model, skip_permissions, mode, prompt_arg)
