# src/claude_mode/errors.py
"""
Error taxonomy, classification and user-facing formatting.

Lower layers turn raw failures into ``ClassifiedError`` values with
``classify_error``; only the launcher, setup wizard and CLI commands raise
``ClaudeModeError`` and terminate the process.
"""

from __future__ import annotations

import socket
import traceback
from dataclasses import dataclass
from enum import Enum

from chuk_term.ui import output

from claude_mode.config.defaults import APP_NAME, CLAUDE_INSTALL_HINT
from claude_mode.config.env_vars import EnvVar, get_env_bool


class ErrorCode(str, Enum):
    """Every failure the launcher knows how to explain."""

    # Connection errors
    CONNECTION_REFUSED = "CONNECTION_REFUSED"
    CONNECTION_TIMEOUT = "CONNECTION_TIMEOUT"
    DNS_RESOLUTION_FAILED = "DNS_RESOLUTION_FAILED"

    # Auth errors
    AUTH_MISSING = "AUTH_MISSING"
    AUTH_INVALID = "AUTH_INVALID"

    # Provider errors
    PROVIDER_NOT_FOUND = "PROVIDER_NOT_FOUND"
    PROVIDER_UNAVAILABLE = "PROVIDER_UNAVAILABLE"

    # Model errors
    MODEL_NOT_FOUND = "MODEL_NOT_FOUND"
    MODEL_FETCH_FAILED = "MODEL_FETCH_FAILED"

    # External agent errors
    CLAUDE_NOT_FOUND = "CLAUDE_NOT_FOUND"
    CLAUDE_FAILED = "CLAUDE_FAILED"

    # Config errors
    CONFIG_PARSE_ERROR = "CONFIG_PARSE_ERROR"

    # Setup wizard errors
    SETUP_CANCELLED = "SETUP_CANCELLED"
    SETUP_INCOMPLETE = "SETUP_INCOMPLETE"
    SETUP_WRITE_FAILED = "SETUP_WRITE_FAILED"

    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class ClassifiedError:
    """A failure mapped onto the taxonomy, with an optional remediation hint."""

    code: ErrorCode
    message: str
    hint: str | None = None
    cause: BaseException | None = None


class ClaudeModeError(Exception):
    """Raised by the layers allowed to abort a command."""

    def __init__(self, error: ClassifiedError):
        super().__init__(error.message)
        self.error = error

    @property
    def code(self) -> ErrorCode:
        return self.error.code


# ── Classification ───────────────────────────────────────────────────────────

HINT_CONNECTION_REFUSED = "Check that the server is running and the URL is correct."
HINT_TIMEOUT = (
    "The server took too long to respond. "
    "Check network connectivity or increase timeout in config."
)
HINT_DNS = "Could not resolve hostname. Check the URL and your internet connection."
HINT_UNAUTHORIZED = "Check that your API key is valid and correctly set in .env file."
HINT_FORBIDDEN = "Your API key may not have access to this resource."
HINT_MODEL_NOT_FOUND = (
    "The specified model does not exist on this provider. "
    "Use --list to see available models."
)
HINT_CLAUDE_NOT_FOUND = f"Install Claude Code CLI: {CLAUDE_INSTALL_HINT}"


def _any(msg: str, *needles: str) -> bool:
    return any(needle in msg for needle in needles)


# Ordered: the first matching rule wins.
_RULES: list[tuple[ErrorCode, str, str, object]] = [
    (
        ErrorCode.CONNECTION_REFUSED,
        "Connection refused",
        HINT_CONNECTION_REFUSED,
        lambda m: _any(m, "econnrefused", "connection refused", "actively refused"),
    ),
    (
        ErrorCode.CONNECTION_TIMEOUT,
        "Connection timed out",
        HINT_TIMEOUT,
        lambda m: _any(m, "etimedout", "timeout", "timed out"),
    ),
    (
        ErrorCode.DNS_RESOLUTION_FAILED,
        "DNS resolution failed",
        HINT_DNS,
        lambda m: _any(
            m,
            "enotfound",
            "getaddrinfo",
            "name or service not known",
            "nodename nor servname",
            "temporary failure in name resolution",
        ),
    ),
    (
        ErrorCode.AUTH_INVALID,
        "Authentication failed",
        HINT_UNAUTHORIZED,
        lambda m: _any(m, "401", "unauthorized"),
    ),
    (
        ErrorCode.AUTH_INVALID,
        "Access forbidden",
        HINT_FORBIDDEN,
        lambda m: _any(m, "403", "forbidden"),
    ),
    (
        ErrorCode.MODEL_NOT_FOUND,
        "Model not found",
        HINT_MODEL_NOT_FOUND,
        lambda m: "model" in m and _any(m, "not found", "404"),
    ),
    (
        ErrorCode.CLAUDE_NOT_FOUND,
        "Claude CLI not found",
        HINT_CLAUDE_NOT_FOUND,
        lambda m: _any(m, "enoent", "no such file or directory") and "claude" in m,
    ),
]


def _raw_message(error: object) -> str:
    if isinstance(error, BaseException):
        # Some transport errors (httpx.ReadTimeout) carry an empty message
        return str(error) or type(error).__name__
    return str(error)


# Socket-level exception types, checked on every link of the chain. Their
# text ("Connect call failed") does not always name the failure.
_TYPE_RULES: list[tuple[type[BaseException], ErrorCode]] = [
    (ConnectionRefusedError, ErrorCode.CONNECTION_REFUSED),
    (TimeoutError, ErrorCode.CONNECTION_TIMEOUT),
    (socket.gaierror, ErrorCode.DNS_RESOLUTION_FAILED),
]


def _exception_chain(error: BaseException) -> list[BaseException]:
    """
    *error* followed by its causes, outermost first.

    Follows ``__cause__`` and ``__context__`` and descends into exception
    groups (anyio raises one when every address of a host refuses).
    """
    chain: list[BaseException] = []
    seen: set[int] = set()
    pending = [error]
    while pending:
        exc = pending.pop(0)
        if id(exc) in seen:
            continue
        seen.add(id(exc))
        chain.append(exc)
        if isinstance(exc, BaseExceptionGroup):
            pending.extend(exc.exceptions)
        pending.extend(e for e in (exc.__cause__, exc.__context__) if e is not None)
    return chain


def _match(link: object) -> tuple[ErrorCode, str, str] | None:
    if isinstance(link, BaseException):
        for exc_type, code in _TYPE_RULES:
            if isinstance(link, exc_type):
                rule = next(r for r in _RULES if r[0] is code)
                return rule[0], rule[1], rule[2]

    msg = _raw_message(link).lower()
    for code, message, hint, matcher in _RULES:
        if matcher(msg):  # type: ignore[operator]
            return code, message, hint
    return None


def classify_error(error: object) -> ClassifiedError:
    """
    Map a raw failure onto the taxonomy.

    Matching is a case-insensitive substring test over the error message,
    checked in a fixed order. When the outermost message is not recognised
    the chained causes are tried in turn, by type and then by message.
    Anything unrecognised becomes ``UNKNOWN`` with the original message kept
    verbatim.
    """
    if isinstance(error, ClaudeModeError):
        return error.error
    if isinstance(error, ClassifiedError):
        return error

    raw = _raw_message(error)
    cause = error if isinstance(error, BaseException) else None
    links = _exception_chain(error) if cause is not None else [error]

    for link in links:
        matched = _match(link)
        if matched is not None:
            code, message, hint = matched
            return ClassifiedError(code=code, message=message, hint=hint, cause=cause)

    return ClassifiedError(code=ErrorCode.UNKNOWN, message=raw, cause=cause)


# ── Formatting ───────────────────────────────────────────────────────────────


def is_debug_enabled() -> bool:
    return get_env_bool(EnvVar.DEBUG)


def format_error(error: ClassifiedError, debug: bool | None = None) -> str:
    """Plain-text rendering: message, hint, and the cause's traceback in debug."""
    lines = [f"Error: {error.message}"]
    if error.hint:
        lines.append(f"Hint: {error.hint}")

    if debug is None:
        debug = is_debug_enabled()
    if debug and error.cause is not None:
        trace = "".join(
            traceback.format_exception(
                type(error.cause), error.cause, error.cause.__traceback__
            )
        ).rstrip()
        lines.append(f"Debug: {trace}")

    return "\n".join(lines)


def print_error(error: ClassifiedError, debug: bool | None = None) -> None:
    """Print a classified error through chuk-term."""
    output.error(error.message)
    if error.hint:
        output.hint(error.hint)

    if debug is None:
        debug = is_debug_enabled()
    if debug and error.cause is not None:
        trace = "".join(
            traceback.format_exception(
                type(error.cause), error.cause, error.cause.__traceback__
            )
        )
        output.print(f"[dim]{trace}[/dim]")


# ── Specific error creators ──────────────────────────────────────────────────


def provider_not_found_error(provider_key: str, available: list[str]) -> ClassifiedError:
    return ClassifiedError(
        code=ErrorCode.PROVIDER_NOT_FOUND,
        message=f"Unknown provider: {provider_key}",
        hint=f"Available providers: {', '.join(available)}",
    )


def model_not_found_error(model_key: str, provider_key: str) -> ClassifiedError:
    return ClassifiedError(
        code=ErrorCode.MODEL_NOT_FOUND,
        message=f"Unknown model: {model_key}",
        hint=f"Use '{APP_NAME} --list' to see available models for {provider_key}.",
    )


def model_fetch_failed_error(
    provider_key: str, detail: str, cause: BaseException | None = None
) -> ClassifiedError:
    return ClassifiedError(
        code=ErrorCode.MODEL_FETCH_FAILED,
        message=f"Failed to fetch models for {provider_key}: {detail}",
        hint="Check the provider URL, or run with offlineMode to use cached models.",
        cause=cause,
    )


def auth_missing_error(provider_name: str, env_var: str) -> ClassifiedError:
    return ClassifiedError(
        code=ErrorCode.AUTH_MISSING,
        message=f"No API key configured for {provider_name}",
        hint=f"Set the {env_var} environment variable in your .env file.",
    )


def claude_not_found_error() -> ClassifiedError:
    return ClassifiedError(
        code=ErrorCode.CLAUDE_NOT_FOUND,
        message="Claude CLI not found in PATH",
        hint=f"{HINT_CLAUDE_NOT_FOUND}\nOr check that it is in your PATH.",
    )


def claude_failed_error(exit_code: int) -> ClassifiedError:
    return ClassifiedError(
        code=ErrorCode.CLAUDE_FAILED,
        message=f"Claude exited with code {exit_code}",
    )


def config_parse_error(path: str, cause: BaseException) -> ClassifiedError:
    return ClassifiedError(
        code=ErrorCode.CONFIG_PARSE_ERROR,
        message=f"Failed to parse config at {path}",
        hint=f"Fix the JSON or recreate it with '{APP_NAME} config init'.",
        cause=cause,
    )


def setup_cancelled_error() -> ClassifiedError:
    return ClassifiedError(code=ErrorCode.SETUP_CANCELLED, message="Setup cancelled")


def setup_incomplete_error(reason: str) -> ClassifiedError:
    return ClassifiedError(
        code=ErrorCode.SETUP_INCOMPLETE,
        message=f"Setup incomplete: {reason}",
        hint=f"Run '{APP_NAME} setup' to try again.",
    )


def setup_write_error(target: str, cause: BaseException) -> ClassifiedError:
    return ClassifiedError(
        code=ErrorCode.SETUP_WRITE_FAILED,
        message=f"Failed to write {target}",
        hint="Check that the directory exists and is writable.",
        cause=cause,
    )
