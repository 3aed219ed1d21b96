"""User-related data models."""

from dataclasses import dataclass


@dataclass
class User:
    """The authenticated user (the bot account itself)."""

    id: int
    username: str
    name: str | None
    state: str
    web_url: str | None


@dataclass
class Author:
    """Compact user reference embedded in merge requests and notes."""

    id: int
    username: str
    name: str
    state: str | None = None
