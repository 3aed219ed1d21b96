"""
gitlab-bot logging utilities.

Provides configurable logging for HTTP requests/responses and for bot
lifecycle events. Ensures the GitLab access token never reaches the logs.
"""

import logging
import re
from typing import Any

# Bot-specific loggers
_bot_logger = logging.getLogger("gitlab_bot")
_http_logger = logging.getLogger("gitlab_bot.http")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # Private-Token header as it appears in header dumps
    (re.compile(r"(private-token['\"]?\s*[:=]\s*['\"]?)[^'\"\s,}]+", re.IGNORECASE), r"\1[REDACTED]"),
    # Bearer credentials
    (re.compile(r"(bearer\s+)[A-Za-z0-9._\-]+", re.IGNORECASE), r"\1[REDACTED]"),
    # GitLab personal/project access tokens
    (re.compile(r"glpat-[A-Za-z0-9_\-]{20,}"), "[TOKEN_REDACTED]"),
    # Secret/token patterns
    (re.compile(r"(secret|token|password|api_key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_DEFAULT_SENSITIVE_KEYS = {"private-token", "authorization", "token", "secret", "password", "api_key"}

# Maximum length of a single field value in an event line
_MAX_VALUE_LEN = 120


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure gitlab-bot logging.

    Args:
        level: Default log level for all bot loggers (default: INFO)
        http_level: Log level for HTTP request/response logging (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from gitlab_bot.logging import configure_logging

        # Show every API call
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
    _bot_logger.handlers.clear()
    _bot_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a gitlab-bot logger.

    Args:
        name: Logger name suffix (e.g., "http", "bot"). If None, returns the main logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _bot_logger
    return logging.getLogger(f"gitlab_bot.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask sensitive data in a string.

    Args:
        text: Text that may contain tokens or credentials

    Returns:
        Text with sensitive data masked
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
        sensitive_keys: Set of lower-case keys to mask (default: token-like keys)

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
    headers: dict[str, str] | None = None,
    body: dict[str, Any] | None = None,
) -> None:
    """
    Log an HTTP request at DEBUG level with sensitive data masked.

    Args:
        method: HTTP method (GET, POST, etc.)
        url: Request URL
        headers: Request headers (optional)
        body: Request body (optional)
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {mask_sensitive_data(url)}"]

    if headers:
        log_parts.append(f"headers={safe_log_dict(headers)}")

    if body:
        log_parts.append(f"body={safe_log_dict(body)}")

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
        url: Request URL
        elapsed_ms: Request duration in milliseconds (optional)
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {mask_sensitive_data(url)}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    _http_logger.debug(" | ".join(log_parts))


def log_event(
    logger: logging.Logger,
    event: str,
    level: int = logging.INFO,
    **fields: object,
) -> None:
    """
    Log a lifecycle event as a single ``event=<name> key=value`` line.

    Field keys are sorted so lines for the same event always line up.
    """
    if not logger.isEnabledFor(level):
        return
    parts = [f"event={_normalize_field_value(event)}"]
    for key in sorted(fields):
        parts.append(f"{key}={_normalize_field_value(fields[key])}")
    logger.log(level, mask_sensitive_data(" ".join(parts)))


def _normalize_field_value(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    collapsed = " ".join(str(value).split())
    if len(collapsed) > _MAX_VALUE_LEN:
        collapsed = f"{collapsed[:_MAX_VALUE_LEN]}..."
    if not collapsed or any(ch in collapsed for ch in " =\""):
        collapsed = '"' + collapsed.replace('"', '\\"') + '"'
    return collapsed


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_event",
]
