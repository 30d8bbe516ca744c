"""
mergebot logging utilities.

Provides configurable logging for GitHub requests/responses and for the merge
engine. Ensures no credentials (tokens, private keys, webhook signatures) are
logged.
"""

import logging
import re
from collections.abc import MutableMapping
from typing import Any

from mergebot.types.pulls import PullRequestRef

# Create bot-specific loggers
_bot_logger = logging.getLogger("mergebot")
_http_logger = logging.getLogger("mergebot.http")
_engine_logger = logging.getLogger("mergebot.engine")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # Private key patterns (PEM format)
    (re.compile(r"-----BEGIN[^-]*PRIVATE KEY-----.*?-----END[^-]*PRIVATE KEY-----", re.DOTALL), "[PRIVATE_KEY_REDACTED]"),
    # Authorization headers
    (re.compile(r"(Bearer|token)\s+[A-Za-z0-9_\-\.=]{8,}", re.IGNORECASE), r"\1 [REDACTED]"),
    # GitHub token formats (ghp_, ghs_, gho_, github_pat_)
    (re.compile(r"\b(gh[pousr]_[A-Za-z0-9]{20,}|github_pat_[A-Za-z0-9_]{20,})\b"), "[TOKEN_REDACTED]"),
    # Compact JWTs
    (re.compile(r"\beyJ[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+"), "[JWT_REDACTED]"),
    # Webhook signatures
    (re.compile(r"sha256=[a-fA-F0-9]{64}"), "sha256=[SIGNATURE_REDACTED]"),
    # Secret/token patterns
    (re.compile(r"(secret|token|password|api_key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_DEFAULT_SENSITIVE_KEYS = {
    "authorization",
    "private_key",
    "secret",
    "token",
    "password",
    "api_key",
    "x-hub-signature-256",
}


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure mergebot logging.

    Args:
        level: Default log level for all bot loggers (default: INFO)
        http_level: Log level for GitHub request/response logging (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from mergebot.logging import configure_logging

        # Enable debug logging for GitHub API calls
        configure_logging(level=logging.INFO, http_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _bot_logger.setLevel(level)
    _bot_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)
    _engine_logger.setLevel(level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a mergebot logger.

    Args:
        name: Logger name suffix (e.g., "http", "engine"). If None, returns the main logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _bot_logger
    return logging.getLogger(f"mergebot.{name}")


class PullRequestLogAdapter(logging.LoggerAdapter):
    """Prefixes every message with the pull request identity (``owner/repo #n: ``)."""

    def __init__(self, logger: logging.Logger, ref: PullRequestRef) -> None:
        super().__init__(logger, {"pull_request": str(ref)})
        self.ref = ref

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        return f"{self.ref}: {msg}", kwargs


def mask_sensitive_data(text: str) -> str:
    """
    Mask sensitive data in a string.

    Replaces private keys, tokens, JWTs and webhook signatures with redacted
    placeholders.
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Set of keys to mask (default: authorization, token, secret, ...)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _DEFAULT_SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if key_lower in sensitive_keys or any(sk in key_lower for sk in sensitive_keys):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    params: dict[str, Any] | None = None,
    body: dict[str, Any] | None = None,
) -> None:
    """Log a GitHub API request at DEBUG level with sensitive data masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {url}"]

    if params:
        log_parts.append(f"params={safe_log_dict(params)}")

    if body:
        log_parts.append(f"body={safe_log_dict(body)}")

    _http_logger.debug(" | ".join(log_parts))


def log_http_response(
    status_code: int,
    url: str,
    request_id: str | None = None,
    elapsed_ms: float | None = None,
) -> None:
    """Log a GitHub API response at DEBUG level."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {url}"]

    if request_id:
        log_parts.append(f"request_id={request_id}")

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    _http_logger.debug(" | ".join(log_parts))


# Export public API
__all__ = [
    "configure_logging",
    "get_logger",
    "PullRequestLogAdapter",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
]
