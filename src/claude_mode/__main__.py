# src/claude_mode/__main__.py
"""Allow ``python -m claude_mode``."""

from claude_mode.main import main

if __name__ == "__main__":
    main()
