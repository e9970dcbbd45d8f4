# src/claude_mode/__init__.py
"""claude-mode: launch Claude Code against OpenRouter or Ollama providers."""

__version__ = "1.2.0"
