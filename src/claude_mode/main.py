# src/claude_mode/main.py
"""Entry-point for the claude-mode CLI"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import click
import typer
from chuk_term.ui import output
from dotenv import load_dotenv
from typer.core import TyperGroup

from claude_mode import __version__
from claude_mode.commands.completion import Shell, generate_completion
from claude_mode.commands.config import ConfigAction, config_action
from claude_mode.commands.health import health_action
from claude_mode.commands.launch import launch_action
from claude_mode.commands.list_models import list_action
from claude_mode.commands.setup import setup_action
from claude_mode.config.config_store import get_config_dir
from claude_mode.config.defaults import APP_NAME, DEFAULT_LOG_LEVEL, ENV_FILENAME
from claude_mode.config.logging import setup_logging
from claude_mode.context import ApplicationContext
from claude_mode.errors import ClaudeModeError, print_error

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "launch"

# Group-level options that may precede the default command's arguments
_GROUP_FLAGS = {"-v", "--verbose", "-q", "--quiet", "--version", "--help"}
_GROUP_VALUE_OPTIONS = {"--log-level", "--log-file", "--log-format"}

LOGGING_META = "claude_mode.logging"


class LogFormat(str, Enum):
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


class DefaultCommandGroup(TyperGroup):
    """
    Group that falls back to a hidden default command.

    ``claude-mode or sonnet`` and ``claude-mode -p "..."`` are routed to
    ``launch``; real subcommand names (``list``, ``health`` ...) are not.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        index = 0
        while index < len(args):
            arg = args[index]
            if arg in ("--help", "--version"):
                return super().parse_args(ctx, args)
            if arg in _GROUP_FLAGS or arg.split("=", 1)[0] in _GROUP_VALUE_OPTIONS:
                index += 1
            elif arg in _GROUP_VALUE_OPTIONS:
                index += 2
            else:
                break
        if index >= len(args) or args[index] not in self.commands:
            args = [*args[:index], DEFAULT_COMMAND, *args[index:]]
        return super().parse_args(ctx, args)


app = typer.Typer(
    cls=DefaultCommandGroup,
    add_completion=False,
    help=(
        "Launch Claude Code with different providers.\n\n"
        "Examples: claude-mode (menu) | claude-mode or sonnet | "
        'claude-mode -p "review this code" | claude-mode ollama-local qwen3 h "list files"'
    ),
)


def load_env_files(config_dir: Path | None = None) -> None:
    """Load ``./.env`` then ``~/.claude-mode/.env``; existing variables win."""
    load_dotenv(Path.cwd() / ENV_FILENAME, override=False)
    load_dotenv((config_dir or get_config_dir()) / ENV_FILENAME, override=False)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{APP_NAME} {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Enable debug logging and tracebacks"
    ),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only log errors"),
    log_level: str = typer.Option(DEFAULT_LOG_LEVEL, "--log-level", help="Set log level"),
    log_file: Optional[str] = typer.Option(
        None, "--log-file", help="Also write a rotating debug log to this file"
    ),
    log_format: LogFormat = typer.Option(
        LogFormat.SIMPLE, "--log-format", help="Console log format"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Claude Mode - launch Claude Code with different providers."""
    logging_options = {
        "level": log_level,
        "quiet": quiet,
        "format_style": log_format.value,
        "log_file": log_file,
    }
    ctx.meta[LOGGING_META] = logging_options
    try:
        setup_logging(verbose=verbose, **logging_options)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level") from e
    load_env_files()
    if ctx.obj is None:
        ctx.obj = ApplicationContext.create(verbose=verbose)
    elif verbose:
        ctx.obj.verbose = True


def _context(ctx: typer.Context) -> ApplicationContext:
    app_ctx = ctx.obj
    if not isinstance(app_ctx, ApplicationContext):
        app_ctx = ApplicationContext.create()
        ctx.obj = app_ctx
    return app_ctx


def run_action(app_ctx: ApplicationContext, coro: Coroutine[Any, Any, Any]) -> Any:
    """Run an async action, turning expected failures into exit code 1."""
    try:
        return asyncio.run(coro)
    except ClaudeModeError as e:
        print_error(e.error, debug=app_ctx.verbose or None)
        raise typer.Exit(1) from e
    except KeyboardInterrupt:
        output.warning("Interrupted")
        logger.debug("Interrupted by user")
        raise typer.Exit(130)


@app.command(DEFAULT_COMMAND, hidden=True)
def launch_command(
    ctx: typer.Context,
    provider: Optional[str] = typer.Argument(
        None, help="Provider key or alias (openrouter/or, ollama-local/ol, ...)"
    ),
    model: Optional[str] = typer.Argument(None, help="Model shortcut or id"),
    mode: Optional[str] = typer.Argument(
        None, help="terminal/t, headless/h, or the prompt itself"
    ),
    prompt_arg: Optional[str] = typer.Argument(None, help="Prompt for headless mode"),
    prompt: Optional[str] = typer.Option(
        None,
        "-p",
        "--prompt",
        help="Run headless with this prompt (uses configured defaults)",
    ),
    skip_permissions: bool = typer.Option(
        False,
        "-d",
        "--dangerously-skip-permissions",
        help="Skip permission prompts when executing commands",
    ),
    list_models: bool = typer.Option(
        False, "-l", "--list", help="List all available providers and models"
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Enable debug logging and tracebacks"
    ),
) -> None:
    """Launch Claude Code (default command)."""
    app_ctx = _context(ctx)
    if verbose:
        app_ctx.verbose = True
        setup_logging(verbose=True, **ctx.meta.get(LOGGING_META, {}))

    if list_models:
        run_action(app_ctx, list_action(app_ctx))
        return

    run_action(
        app_ctx,
        launch_action(
            app_ctx,
            provider=provider,
            model=model,
            mode=mode,
            prompt_arg=prompt_arg,
            prompt_option=prompt,
            skip_permissions=skip_permissions,
        ),
    )


@app.command("list")
def list_command(ctx: typer.Context) -> None:
    """List all available providers and models."""
    app_ctx = _context(ctx)
    run_action(app_ctx, list_action(app_ctx))


@app.command("health")
def health_command(ctx: typer.Context) -> None:
    """Check health/availability of all providers."""
    app_ctx = _context(ctx)
    run_action(app_ctx, health_action(app_ctx))


@app.command("config")
def config_command(
    ctx: typer.Context,
    action: ConfigAction = typer.Argument(ConfigAction.SHOW, help="show or init"),
) -> None:
    """Show the effective configuration or create a default config file."""
    config_action(_context(ctx), action)


@app.command("completion")
def completion_command(
    ctx: typer.Context,
    shell: Shell = typer.Argument(..., help="bash, zsh or fish"),
) -> None:
    """Generate a shell completion script."""
    app_ctx = _context(ctx)
    typer.echo(generate_completion(shell, app_ctx.registry.get_providers()))


@app.command("setup")
def setup_command(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Skip the update prompt"),
    provider: Optional[str] = typer.Option(
        None, "--provider", help="Configure only this provider"
    ),
    skip_validation: bool = typer.Option(
        False, "--skip-validation", help="Do not health-check providers"
    ),
) -> None:
    """Interactive setup wizard for providers and defaults."""
    app_ctx = _context(ctx)
    run_action(
        app_ctx,
        setup_action(
            app_ctx, force=force, provider=provider, skip_validation=skip_validation
        ),
    )


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
