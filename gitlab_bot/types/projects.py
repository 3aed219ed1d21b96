"""Project and repository data models."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Project:
    """GitLab project information."""

    id: int
    name: str
    path_with_namespace: str
    default_branch: str | None
    web_url: str
    description: str | None = None


@dataclass
class Commit:
    """A single repository commit."""

    id: str
    short_id: str
    title: str
    message: str
    author_name: str
    author_email: str
    authored_date: datetime
    committed_date: datetime
    committer_name: str | None = None
    committer_email: str | None = None
    parent_ids: list[str] = field(default_factory=list)


@dataclass
class Branch:
    """A repository branch together with its head commit."""

    name: str
    commit: Commit
    merged: bool = False
    protected: bool = False
