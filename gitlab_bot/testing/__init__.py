"""gitlab-bot testing utilities.

Provides an in-memory mock GitLab client, record factories and fixtures for
testing the bot without a GitLab instance.
"""

from gitlab_bot.testing.fixtures import (
    FIXED_NOW,
    create_full_merge_request,
    create_mock_author,
    create_mock_branch,
    create_mock_commit,
    create_mock_job,
    create_mock_merge_request,
    create_mock_note,
    create_mock_pipeline,
    create_mock_project,
    create_mock_user,
    seed_merge_request,
)
from gitlab_bot.testing.mock import MockCall, MockGitLabClient

__all__ = [
    # Mock client
    "MockGitLabClient",
    "MockCall",
    # Helper functions
    "FIXED_NOW",
    "create_mock_user",
    "create_mock_author",
    "create_mock_project",
    "create_mock_commit",
    "create_mock_branch",
    "create_mock_merge_request",
    "create_mock_note",
    "create_mock_pipeline",
    "create_mock_job",
    "create_full_merge_request",
    "seed_merge_request",
]
