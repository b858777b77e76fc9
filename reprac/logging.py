"""
reprac logging utilities.

Provides configurable logging for HTTP requests/responses and dashboard
state changes. Ensures the GitHub token never reaches a log record.
"""

import logging
import re
from typing import Any

# Create package loggers
_root_logger = logging.getLogger("reprac")
_http_logger = logging.getLogger("reprac.http")
_orchestrator_logger = logging.getLogger("reprac.orchestrator")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # Authorization header values
    (re.compile(r"(Bearer|token)\s+[A-Za-z0-9_\-.]+", re.IGNORECASE), r"\1 [REDACTED]"),
    # GitHub token formats (classic and fine-grained)
    (re.compile(r"\b(gh[pousr]_[A-Za-z0-9]{20,}|github_pat_[A-Za-z0-9_]{20,})\b"), "[TOKEN_REDACTED]"),
    # Secret/token assignments
    (re.compile(r"(secret|token|password)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_SENSITIVE_KEYS = {"authorization", "token", "secret", "password"}


class SensitiveDataFilter(logging.Filter):
    """Mask tokens in the formatted message of every record passing through."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = mask_sensitive_data(record.getMessage())
        record.args = None
        return True


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure reprac logging.

    The dashboard owns the terminal, so the CLI passes a ``FileHandler`` here
    (or a ``NullHandler`` when no log file was requested).

    Args:
        level: Default log level for all reprac loggers (default: INFO)
        http_level: Log level for HTTP request/response logging (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from reprac.logging import configure_logging

        configure_logging(
            level=logging.INFO,
            http_level=logging.DEBUG,
            handler=logging.FileHandler("reprac.log"),
        )
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)
    handler.addFilter(SensitiveDataFilter())

    _root_logger.setLevel(level)
    _root_logger.addHandler(handler)
    _root_logger.propagate = False

    _http_logger.setLevel(http_level if http_level is not None else level)
    _orchestrator_logger.setLevel(level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a reprac logger.

    Args:
        name: Logger name suffix (e.g., "http", "registry"). If None, returns the package logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _root_logger
    return logging.getLogger(f"reprac.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask tokens in a string.

    Args:
        text: Text that may contain a token

    Returns:
        Text with tokens masked
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
        sensitive_keys: Set of keys to mask (default: authorization, token, secret, password)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if any(sk in key_lower for sk in sensitive_keys):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
) -> None:
    """
    Log an HTTP request at DEBUG level with the token masked.

    Args:
        method: HTTP method
        url: Request URL or path
        headers: Request headers (optional)
        params: Query parameters (optional)
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {url}"]

    if params:
        log_parts.append(f"params={params}")

    if headers:
        log_parts.append(f"headers={safe_log_dict(headers)}")

    _http_logger.debug(" | ".join(log_parts))


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
) -> None:
    """
    Log an HTTP response at DEBUG level.

    Args:
        status_code: HTTP status code
        url: Request URL or path
        elapsed_ms: Request duration in milliseconds (optional)
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {url}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    _http_logger.debug(" | ".join(log_parts))


# Export public API
__all__ = [
    "SensitiveDataFilter",
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
]
