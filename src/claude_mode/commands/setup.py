# src/claude_mode/commands/setup.py
"""``claude-mode setup``: run the wizard and report cancellation or failure."""

from __future__ import annotations

import typer
from chuk_term.ui import output

from claude_mode.config.defaults import APP_NAME
from claude_mode.context import ApplicationContext
from claude_mode.errors import ClaudeModeError, ErrorCode, print_error
from claude_mode.setup import run_setup


async def setup_action(
    ctx: ApplicationContext,
    force: bool = False,
    provider: str | None = None,
    skip_validation: bool = False,
) -> bool:
    try:
        return await run_setup(
            ctx, force=force, provider=provider, skip_validation=skip_validation
        )
    except ClaudeModeError as e:
        if e.code is ErrorCode.SETUP_CANCELLED:
            output.warning("Setup cancelled.")
            output.hint(f"Run '{APP_NAME} setup' to try again.")
            return False
        output.error("Setup failed:")
        print_error(e.error, debug=ctx.verbose or None)
        output.hint(f"You can run '{APP_NAME} setup' to try again.")
        raise typer.Exit(1) from e
