"""
gitlab-bot configuration.

Two layers live here: ``BotConfig`` is the process-level configuration read
from the environment, ``RepoConfig`` is the per-project policy read from a
``.gitlab-bot.toml`` file inside each repository.
"""

import logging
import os
import re
import tomllib
from dataclasses import dataclass, field
from typing import Any

from gitlab_bot.exceptions import ConfigurationError
from gitlab_bot.logging import log_event

logger = logging.getLogger("gitlab_bot.config")

REPO_CONFIG_PATH = ".gitlab-bot.toml"
FALLBACK_BRANCH = "master"


@dataclass
class BotConfig:
    """Process configuration for the reconciliation loop."""

    endpoint: str
    token: str
    interval: float = 300.0
    concurrency: int = 5
    timeout: float = 30.0
    log_level: int = logging.INFO

    @classmethod
    def from_env(cls) -> "BotConfig":
        """
        Create a configuration from environment variables.

        Environment variables:
            GITLAB_BOT_URL: GitLab base URL (required)
            GITLAB_BOT_TOKEN: Access token (required)
            GITLAB_BOT_INTERVAL: Poll interval in seconds (optional, default: 300)
            GITLAB_BOT_CONCURRENCY: Merge requests processed at once (optional, default: 5)
            GITLAB_BOT_TIMEOUT: HTTP timeout in seconds (optional, default: 30)
            GITLAB_BOT_LOG_LEVEL: Log level name (optional, default: INFO)

        Raises:
            ConfigurationError: If a required variable is missing or a value is malformed
        """
        endpoint = os.environ.get("GITLAB_BOT_URL")
        token = os.environ.get("GITLAB_BOT_TOKEN")

        if not endpoint:
            raise ConfigurationError("Missing env var: GITLAB_BOT_URL")

        if not token:
            raise ConfigurationError("Missing env var: GITLAB_BOT_TOKEN")

        return cls(
            endpoint=endpoint,
            token=token,
            interval=_env_number("GITLAB_BOT_INTERVAL", 300.0, float),
            concurrency=_env_number("GITLAB_BOT_CONCURRENCY", 5, int),
            timeout=_env_number("GITLAB_BOT_TIMEOUT", 30.0, float),
            log_level=parse_log_level(os.environ.get("GITLAB_BOT_LOG_LEVEL", "INFO")),
        )


def _env_number(name: str, default: Any, kind: type) -> Any:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = kind(raw)
    except ValueError as e:
        raise ConfigurationError(f"Invalid {name}: {raw!r}") from e
    if value <= 0:
        raise ConfigurationError(f"Invalid {name}: must be positive, got {raw!r}")
    return value


def parse_log_level(name: str) -> int:
    """Translate a level name such as ``"debug"`` into a logging level."""
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"Invalid log level: {name!r}")
    return level


@dataclass
class ValidationRule:
    """A naming rule: a regex pattern plus an optional custom error text."""

    pattern: str
    error: str | None = None

    @property
    def regex(self) -> re.Pattern[str] | None:
        """Compiled pattern, or None when the pattern is not a valid regex."""
        try:
            return re.compile(self.pattern)
        except re.error:
            return None

    def error_message(self, default_subject: str) -> str:
        if self.error:
            return self.error
        return f"{default_subject} must match the pattern: `{self.pattern}`"


@dataclass
class ReportConfig:
    """A CI report to extract from a job's artifacts."""

    job_name: str
    path: str
    format: str | None = None


@dataclass
class RepoConfig:
    """Per-project policy. The default value means "no policy, not disabled"."""

    disabled: bool = False
    title_rule: ValidationRule | None = None
    branch_name_rule: ValidationRule | None = None
    reports: list[ReportConfig] = field(default_factory=list)

    def is_disabled(self) -> bool:
        return self.disabled

    @classmethod
    def from_toml(cls, data: bytes | str) -> "RepoConfig":
        """
        Parse a ``.gitlab-bot.toml`` document.

        Rules whose pattern does not compile are dropped with a warning, as if
        they had not been configured.

        Raises:
            ConfigurationError: If the document is not valid TOML or has wrong types
        """
        if isinstance(data, bytes):
            try:
                data = data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ConfigurationError(f"Repo config is not UTF-8: {e}") from e
        try:
            raw = tomllib.loads(data)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Repo config is not valid TOML: {e}") from e

        disabled = raw.get("disabled", False)
        if not isinstance(disabled, bool):
            raise ConfigurationError("'disabled' must be a boolean")

        raw_reports = raw.get("reports", [])
        if not isinstance(raw_reports, list):
            raise ConfigurationError("'reports' must be an array of tables")
        reports = []
        for item in raw_reports:
            if not isinstance(item, dict) or "job_name" not in item or "path" not in item:
                raise ConfigurationError("each [[reports]] entry needs job_name and path")
            report_format = item.get("format")
            if report_format is not None and not isinstance(report_format, str):
                raise ConfigurationError("'format' must be a string")
            reports.append(
                ReportConfig(
                    job_name=str(item["job_name"]),
                    path=str(item["path"]),
                    format=report_format,
                )
            )

        return cls(
            disabled=disabled,
            title_rule=_parse_rule(raw, "merge_request_title_pattern", "merge_request_title_error"),
            branch_name_rule=_parse_rule(raw, "branch_name_pattern", "branch_name_error"),
            reports=reports,
        )


def _parse_rule(raw: dict[str, Any], pattern_key: str, error_key: str) -> ValidationRule | None:
    pattern = raw.get(pattern_key)
    if pattern is None:
        return None
    if not isinstance(pattern, str):
        raise ConfigurationError(f"'{pattern_key}' must be a string")
    error = raw.get(error_key)
    if error is not None and not isinstance(error, str):
        raise ConfigurationError(f"'{error_key}' must be a string")

    rule = ValidationRule(pattern=pattern, error=error)
    if rule.regex is None:
        log_event(logger, "repo_config_bad_pattern", logging.WARNING, key=pattern_key, pattern=pattern)
        return None
    return rule
