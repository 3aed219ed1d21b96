"""gitlab-bot async resource clients."""

from gitlab_bot.async_clients.merge_requests import AsyncMergeRequestsClient
from gitlab_bot.async_clients.pipelines import AsyncPipelinesClient
from gitlab_bot.async_clients.projects import AsyncProjectsClient
from gitlab_bot.async_clients.users import AsyncUsersClient

__all__ = [
    "AsyncUsersClient",
    "AsyncProjectsClient",
    "AsyncMergeRequestsClient",
    "AsyncPipelinesClient",
]
