"""gitlab-bot - merge request policy checks and status reports for GitLab."""

from gitlab_bot.async_client import AsyncGitLabClient
from gitlab_bot.async_transport import AsyncHTTPTransport
from gitlab_bot.bot import Bot, CycleSummary, Outcome
from gitlab_bot.cache import Cache
from gitlab_bot.comments import CommentKind
from gitlab_bot.config import BotConfig, RepoConfig, ValidationRule
from gitlab_bot.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    DecodeError,
    GitLabBotError,
    MissingDataError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from gitlab_bot.logging import configure_logging, get_logger
from gitlab_bot.reconciler import ReportAction, plan_report_update, reconcile_report
from gitlab_bot.report import Notice, Report, evaluate

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Client
    "AsyncGitLabClient",
    "AsyncHTTPTransport",
    # Loop
    "Bot",
    "CycleSummary",
    "Outcome",
    "Cache",
    # Policy
    "CommentKind",
    "Notice",
    "Report",
    "evaluate",
    "ReportAction",
    "plan_report_update",
    "reconcile_report",
    # Configuration
    "BotConfig",
    "RepoConfig",
    "ValidationRule",
    # Exceptions
    "GitLabBotError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    "DecodeError",
    "MissingDataError",
    "ConfigurationError",
    # Logging
    "configure_logging",
    "get_logger",
]
