# src/claude_mode/commands/list_models.py
"""``claude-mode list`` / ``--list``: every provider with its models."""

from __future__ import annotations

from chuk_term.ui import output

from claude_mode.context import ApplicationContext


async def list_action(ctx: ApplicationContext) -> None:
    output.rule("Available Models by Provider")

    for key, provider in ctx.registry.get_providers().items():
        models = await ctx.discovery.get_models(key)

        output.print(f"[cyan]{provider.name}:[/cyan]")
        output.print(f"  [dim]{provider.get_description()}[/dim]")

        if not models:
            error = ctx.discovery.last_error(key)
            detail = f" - {error.message}" if error else ""
            output.print(f"  [dim](no models found{detail})[/dim]")
        else:
            for model in models:
                output.print(f"  [green]{model.shortcut:<14}[/green] → {model.id}")
        output.print()
