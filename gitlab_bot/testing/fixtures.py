"""
Pytest fixtures and factories for gitlab-bot testing.

The ``create_mock_*`` factories build typed records with sensible
defaults; every field can be overridden by keyword.
"""

from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest

from gitlab_bot.config import REPO_CONFIG_PATH, RepoConfig
from gitlab_bot.testing.mock import MockGitLabClient
from gitlab_bot.types.merge_requests import FullMergeRequest, MergeRequest, Note
from gitlab_bot.types.pipelines import Job, Pipeline
from gitlab_bot.types.projects import Branch, Commit, Project
from gitlab_bot.types.users import Author, User

FIXED_NOW = datetime(2024, 3, 15, 12, 0, 0, tzinfo=timezone.utc)
BOT_USER_ID = 1000


# ============================================================================
# Factories
# ============================================================================


def create_mock_user(
    id: int = BOT_USER_ID,
    username: str = "gitlab-bot",
    name: str | None = "GitLab Bot",
) -> User:
    return User(id=id, username=username, name=name, state="active", web_url=None)


def create_mock_author(
    id: int = 7,
    username: str = "alice",
    name: str | None = None,
) -> Author:
    return Author(id=id, username=username, name=name or username.title(), state="active")


def create_mock_project(
    id: int = 1,
    name: str = "widgets",
    default_branch: str | None = "master",
    web_url: str | None = None,
) -> Project:
    return Project(
        id=id,
        name=name,
        path_with_namespace=f"acme/{name}",
        default_branch=default_branch,
        web_url=web_url or f"https://gitlab.example.com/acme/{name}",
    )


def create_mock_commit(
    sha: str = "a" * 40,
    title: str = "Add widget",
    committed_date: datetime | None = None,
) -> Commit:
    committed_date = committed_date or FIXED_NOW - timedelta(hours=1)
    return Commit(
        id=sha,
        short_id=sha[:8],
        title=title,
        message=title,
        author_name="Alice",
        author_email="alice@example.com",
        authored_date=committed_date,
        committed_date=committed_date,
    )


def create_mock_branch(
    name: str = "feature/widgets",
    committed_date: datetime | None = None,
) -> Branch:
    return Branch(name=name, commit=create_mock_commit(committed_date=committed_date))


def create_mock_merge_request(
    id: int = 100,
    iid: int = 1,
    project_id: int = 1,
    title: str = "[WID-1] Add widgets",
    source_branch: str = "feature/widgets",
    target_branch: str = "master",
    author: Author | None = None,
    assignee: Author | None = None,
    updated_at: datetime | None = None,
) -> MergeRequest:
    return MergeRequest(
        id=id,
        iid=iid,
        project_id=project_id,
        title=title,
        state="opened",
        source_branch=source_branch,
        target_branch=target_branch,
        author=author or create_mock_author(),
        assignee=assignee,
        updated_at=updated_at or FIXED_NOW - timedelta(minutes=10),
        web_url=f"https://gitlab.example.com/acme/widgets/-/merge_requests/{iid}",
    )


def create_mock_note(
    id: int,
    body: str,
    author: Author | None = None,
    created_at: datetime | None = None,
) -> Note:
    created_at = created_at or FIXED_NOW - timedelta(hours=2)
    return Note(id=id, body=body, author=author, created_at=created_at, updated_at=created_at)


def create_mock_pipeline(id: int = 50, status: str = "success", ref: str = "feature/widgets") -> Pipeline:
    return Pipeline(id=id, sha="a" * 40, ref=ref, status=status)


def create_mock_job(id: int, name: str, status: str = "success", stage: str = "test") -> Job:
    return Job(id=id, name=name, status=status, stage=stage, ref="feature/widgets")


def create_full_merge_request(
    request: MergeRequest | None = None,
    project: Project | None = None,
    source_branch: Branch | None = None,
    comments: list[Note] | None = None,
    bot_id: int = BOT_USER_ID,
    pipelines: list[Pipeline] | None = None,
    repo_config: RepoConfig | None = None,
) -> FullMergeRequest:
    """Build a snapshot directly; ``bot_comments`` is derived from ``comments``."""
    request = request or create_mock_merge_request()
    comments = comments or []
    return FullMergeRequest(
        project=project or create_mock_project(id=request.project_id),
        request=request,
        source_branch=source_branch or create_mock_branch(name=request.source_branch),
        source_branch_commits=[],
        target_branch_commits=[],
        comments=comments,
        bot_comments=[c for c in comments if c.is_authored_by(bot_id)],
        pipelines=pipelines or [],
        repo_config=repo_config or RepoConfig(),
    )


def seed_merge_request(
    client: MockGitLabClient,
    mr: MergeRequest,
    project: Project | None = None,
    branch: Branch | None = None,
    repo_config: str | None = None,
) -> MergeRequest:
    """
    Register ``mr`` and everything needed to load its snapshot.

    Args:
        client: Mock client to populate
        mr: The merge request
        project: Owning project (default: created from ``mr.project_id``)
        branch: Source branch (default: fresh head commit)
        repo_config: Content of ``.gitlab-bot.toml`` (default: no file)
    """
    project = project or client.projects_data.get(mr.project_id) or create_mock_project(id=mr.project_id)
    client.add_project(project)
    client.add_branch(mr.project_id, branch or create_mock_branch(name=mr.source_branch))
    if (mr.project_id, mr.target_branch) not in client.branches:
        client.add_branch(mr.project_id, create_mock_branch(name=mr.target_branch))
    if repo_config is not None:
        client.add_file(mr.project_id, REPO_CONFIG_PATH, project.default_branch or "master", repo_config)
    client.add_merge_request(mr)
    return mr


# ============================================================================
# Mock Client Fixtures
# ============================================================================


@pytest.fixture
def mock_client() -> Generator[MockGitLabClient, None, None]:
    """
    Provide a MockGitLabClient whose notes are stamped with FIXED_NOW.

    Example:
        ```python
        def test_my_feature(mock_client):
            seed_merge_request(mock_client, create_mock_merge_request())
            summary = asyncio.run(Bot(mock_client).process())
        ```
    """
    client = MockGitLabClient(user=create_mock_user(), clock=lambda: FIXED_NOW)
    yield client
    client.reset()


@pytest.fixture
def bot_user() -> User:
    """Provide the bot's own user record."""
    return create_mock_user()


@pytest.fixture
def sample_merge_request() -> MergeRequest:
    """Provide a merge request with a valid title and no assignee."""
    return create_mock_merge_request()


@pytest.fixture
def sample_full_merge_request(sample_merge_request: MergeRequest) -> FullMergeRequest:
    """Provide a snapshot without comments, pipelines or policy."""
    return create_full_merge_request(request=sample_merge_request)


@pytest.fixture
def mock_client_with_merge_request(
    mock_client: MockGitLabClient, sample_merge_request: MergeRequest
) -> MockGitLabClient:
    """Provide a mock client holding one open merge request."""
    seed_merge_request(mock_client, sample_merge_request)
    return mock_client
