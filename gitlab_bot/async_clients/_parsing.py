"""Helpers for turning GitLab API payloads into typed records."""

from datetime import datetime, timezone
from typing import Any

from gitlab_bot.exceptions import DecodeError, MissingDataError
from gitlab_bot.types.projects import Commit
from gitlab_bot.types.users import Author


def require(data: Any, key: str, entity: str) -> Any:
    """Return ``data[key]``, raising MissingDataError when it is absent or null."""
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object for {entity}, got {type(data).__name__}")
    value = data.get(key)
    if value is None:
        raise MissingDataError(f"{entity} payload is missing '{key}'")
    return value


def parse_datetime(value: str) -> datetime:
    """Parse an ISO 8601 timestamp into an aware UTC datetime."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise DecodeError(f"Invalid timestamp: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_optional_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    return parse_datetime(value)


def parse_author(data: dict[str, Any] | None) -> Author | None:
    if not data:
        return None
    return Author(
        id=int(require(data, "id", "user")),
        username=require(data, "username", "user"),
        name=data.get("name") or "",
        state=data.get("state"),
    )


def parse_commit(data: dict[str, Any]) -> Commit:
    return Commit(
        id=require(data, "id", "commit"),
        short_id=data.get("short_id") or data["id"][:8],
        title=data.get("title") or "",
        message=data.get("message") or "",
        author_name=data.get("author_name") or "",
        author_email=data.get("author_email") or "",
        authored_date=parse_datetime(require(data, "authored_date", "commit")),
        committed_date=parse_datetime(require(data, "committed_date", "commit")),
        committer_name=data.get("committer_name"),
        committer_email=data.get("committer_email"),
        parent_ids=list(data.get("parent_ids") or []),
    )
