"""Merge request data models."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from gitlab_bot.comments import CommentKind
from gitlab_bot.config import RepoConfig
from gitlab_bot.types.pipelines import Pipeline
from gitlab_bot.types.projects import Branch, Commit, Project
from gitlab_bot.types.users import Author


@dataclass(frozen=True)
class MergeRequestRef:
    """Change-detection key for a merge request."""

    project_id: int
    id: int
    iid: int
    updated_at: datetime


@dataclass
class MergeRequest:
    """Merge request detail record."""

    id: int
    iid: int
    project_id: int
    title: str
    state: str
    source_branch: str
    target_branch: str
    author: Author
    assignee: Author | None
    updated_at: datetime
    web_url: str
    created_at: datetime | None = None
    description: str | None = None
    sha: str | None = None

    @property
    def ref(self) -> MergeRequestRef:
        return MergeRequestRef(
            project_id=self.project_id,
            id=self.id,
            iid=self.iid,
            updated_at=self.updated_at,
        )


@dataclass
class Note:
    """A merge request comment."""

    id: int
    body: str
    author: Author | None
    created_at: datetime
    updated_at: datetime | None = None
    system: bool = False

    def is_authored_by(self, user_id: int) -> bool:
        return self.author is not None and self.author.id == user_id

    def is_kind(self, kind: CommentKind) -> bool:
        return kind.matches(self.body)


@dataclass
class FullMergeRequest:
    """
    Snapshot of everything the bot needs to judge one merge request.

    ``comments`` and ``bot_comments`` are ordered newest first and
    ``pipelines`` most recent first. The snapshot is only valid while
    ``request.updated_at`` equals the remote value.
    """

    project: Project
    request: MergeRequest
    source_branch: Branch
    source_branch_commits: list[Commit]
    target_branch_commits: list[Commit]
    comments: list[Note]
    bot_comments: list[Note]
    pipelines: list[Pipeline]
    repo_config: RepoConfig

    def has_bot_comment(
        self,
        kind: CommentKind,
        max_age: timedelta | None = None,
        now: datetime | None = None,
    ) -> bool:
        """
        Check for a bot comment of the given kind.

        Args:
            kind: Comment kind to look for
            max_age: Only count comments created within this window (default: any age)
            now: Reference instant for ``max_age`` (default: current UTC time)
        """
        if max_age is not None:
            cutoff = (now or datetime.now(timezone.utc)) - max_age
        for comment in self.bot_comments:
            if not comment.is_kind(kind):
                continue
            if max_age is None or comment.created_at > cutoff:
                return True
        return False

    def latest_bot_comment(self, kind: CommentKind) -> Note | None:
        """Return the newest bot comment of the given kind, if any."""
        for comment in self.bot_comments:
            if comment.is_kind(kind):
                return comment
        return None

    def job_url(self, job_id: int) -> str:
        return f"{self.project.web_url.rstrip('/')}/-/jobs/{job_id}"
