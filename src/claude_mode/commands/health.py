# src/claude_mode/commands/health.py
"""``claude-mode health``: probe every provider and summarise."""

from __future__ import annotations

from chuk_term.ui import output

from claude_mode.context import ApplicationContext
from claude_mode.providers.models import HealthCheckResult


def format_health_status(ctx: ApplicationContext, result: HealthCheckResult) -> str:
    provider = ctx.registry.get_provider(result.provider_key)
    name = provider.name if provider else result.provider_key

    if result.healthy:
        latency = f" ({result.latency_ms}ms)" if result.latency_ms is not None else ""
        return f"[green]✓[/green] {name}[dim]{latency}[/dim]"

    message = result.error.message if result.error else "unavailable"
    return f"[red]✗[/red] {name} [dim]- {message}[/dim]"


def print_health_results(ctx: ApplicationContext, results: list[HealthCheckResult]) -> None:
    output.print()
    for result in results:
        output.print(f"  {format_health_status(ctx, result)}")
    output.print()


def summarize(results: list[HealthCheckResult]) -> tuple[int, int]:
    """(healthy, total)"""
    return sum(1 for r in results if r.healthy), len(results)


async def health_action(ctx: ApplicationContext) -> list[HealthCheckResult]:
    output.rule("Provider Health Check")
    results = await ctx.health_checker.check_all_providers()
    print_health_results(ctx, results)

    healthy, total = summarize(results)
    if healthy == total:
        output.success(f"All {total} providers are healthy.")
    else:
        output.warning(f"{healthy}/{total} providers are healthy.")
    return results
