# src/claude_mode/commands/__init__.py
"""CLI command actions. Each takes an ``ApplicationContext``; typer wiring is in ``claude_mode.main``."""
