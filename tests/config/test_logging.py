# tests/config/test_logging.py
"""Tests for logging setup and secret redaction."""

import logging

import pytest

from claude_mode.config.logging import (
    SecretRedactingFilter,
    redact,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


class TestRedaction:
    def test_bearer_token(self):
        assert redact("Authorization: Bearer abc.def") == "Authorization: [REDACTED]"
        assert "abc.def" not in redact("sent Bearer abc.def")

    def test_sk_keys(self):
        assert "sk-or-v1-abcdefghijk" not in redact("key sk-or-v1-abcdefghijk used")

    def test_env_assignment(self):
        assert redact("ANTHROPIC_AUTH_TOKEN=secret123") == "ANTHROPIC_AUTH_TOKEN=[REDACTED]"

    def test_filter_redacts_args(self):
        record = logging.LogRecord(
            "claude_mode", logging.INFO, __file__, 1, "token %s", ("Bearer xyz",), None
        )
        assert SecretRedactingFilter().filter(record) is True
        assert record.getMessage() == "token Bearer [REDACTED]"


class TestSetupLogging:
    def test_invalid_level(self):
        with pytest.raises(ValueError):
            setup_logging(level="NOPE")

    def test_verbose_enables_debug(self):
        setup_logging(verbose=True)
        assert logging.getLogger("claude_mode").level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.NOTSET

    def test_third_party_silenced_by_default(self):
        setup_logging()
        assert logging.getLogger("httpx").level == logging.ERROR
        assert logging.getLogger("claude_mode").level == logging.WARNING

    def test_quiet(self):
        setup_logging(quiet=True)
        assert logging.getLogger().level == logging.ERROR

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "claude-mode.log"
        setup_logging(log_file=str(log_file))
        logging.getLogger("claude_mode.test").warning("api_key=supersecret")
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text()
        assert "supersecret" not in content
        assert "[REDACTED]" in content

    def test_json_format(self):
        setup_logging(format_style="json")
        formatter = logging.getLogger().handlers[0].formatter
        assert formatter._fmt.startswith('{"timestamp"')

    def test_detailed_format(self):
        setup_logging(format_style="detailed")
        assert "%(lineno)d" in logging.getLogger().handlers[0].formatter._fmt
