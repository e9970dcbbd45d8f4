# src/claude_mode/commands/config.py
"""``claude-mode config [show|init]``."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path

from chuk_term.ui import output

from claude_mode.context import ApplicationContext


class ConfigAction(str, Enum):
    SHOW = "show"
    INIT = "init"


def show_config(ctx: ApplicationContext) -> str:
    """Print the effective config (defaults filled in) as JSON."""
    rendered = json.dumps(ctx.config.to_file_dict(), indent=2)
    output.rule("Current Configuration")
    output.print(rendered)
    output.print()
    output.hint(f"File: {ctx.config_store.config_file}")
    return rendered


def init_config(ctx: ApplicationContext) -> Path:
    existed = ctx.config_store.config_file.exists()
    path = ctx.config_store.init()
    if existed:
        output.info(f"Config file already exists at: {path}")
    else:
        output.success(f"Config file created at: {path}")
    output.hint("Edit this file to customize your settings.")
    return path


def config_action(ctx: ApplicationContext, action: ConfigAction = ConfigAction.SHOW) -> None:
    if action is ConfigAction.INIT:
        init_config(ctx)
    else:
        show_config(ctx)
