"""gitlab-bot exception classes."""



class GitLabBotError(Exception):
    """Base exception for all gitlab-bot errors."""

    def __init__(
        self, code: str, message: str, status_code: int | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(f"[{code}] {message}")


class ConfigurationError(GitLabBotError):
    """Raised when bot configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class AuthenticationError(GitLabBotError):
    """Raised when the access token is rejected (401)."""

    pass


class AuthorizationError(GitLabBotError):
    """Raised when access is denied (403)."""

    pass


class NotFoundError(GitLabBotError):
    """Raised when a resource is not found (404)."""

    pass


class ConflictError(GitLabBotError):
    """Raised on conflicts (409)."""

    pass


class RateLimitedError(GitLabBotError):
    """Raised when rate limited (429)."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        status_code: int | None = 429,
    ) -> None:
        super().__init__(code, message, status_code)
        self.retry_after = retry_after


class ValidationError(GitLabBotError):
    """Raised on other client errors (4xx)."""

    pass


class ServerError(GitLabBotError):
    """Raised on server errors (5xx) and connection failures."""

    pass


class DecodeError(GitLabBotError):
    """Raised when a response body cannot be decoded."""

    def __init__(self, message: str) -> None:
        super().__init__("DECODE_ERROR", message)


class MissingDataError(GitLabBotError):
    """Raised when an expected header or field is absent."""

    def __init__(self, message: str) -> None:
        super().__init__("MISSING_DATA", message)
