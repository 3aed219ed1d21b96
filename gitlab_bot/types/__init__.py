"""gitlab-bot type definitions.

This module exports all data model types used by the bot.
"""

from gitlab_bot.types.merge_requests import FullMergeRequest, MergeRequest, MergeRequestRef, Note
from gitlab_bot.types.pipelines import Job, Pipeline
from gitlab_bot.types.projects import Branch, Commit, Project
from gitlab_bot.types.users import Author, User

__all__ = [
    # User types
    "User",
    "Author",
    # Project types
    "Project",
    "Commit",
    "Branch",
    # Merge request types
    "MergeRequest",
    "MergeRequestRef",
    "Note",
    "FullMergeRequest",
    # Pipeline types
    "Pipeline",
    "Job",
]
