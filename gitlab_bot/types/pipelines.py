"""CI pipeline data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Pipeline:
    """CI pipeline summary as attached to a merge request."""

    id: int
    sha: str
    ref: str
    status: str  # "pending", "running", "success", "failed", "canceled", ...
    web_url: str | None = None


@dataclass
class Job:
    """A single job of a CI pipeline."""

    id: int
    name: str
    status: str
    stage: str
    ref: str
    created_at: datetime | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None
