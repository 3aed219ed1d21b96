"""Async projects and repository resource client."""

import math
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from gitlab_bot.async_clients._parsing import parse_commit, require
from gitlab_bot.async_transport import PAGE_SIZE
from gitlab_bot.types.projects import Branch, Commit, Project

if TYPE_CHECKING:
    from gitlab_bot.async_transport import AsyncHTTPTransport


class AsyncProjectsClient:
    """Async client for project and repository operations."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the async projects client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def get(self, project_id: int) -> Project:
        """
        Get project information.

        Args:
            project_id: Numeric project id

        Returns:
            Project with default branch and web URL
        """
        data = await self.transport.get_json(f"projects/{project_id}")
        return self._parse_project(data)

    async def branch(self, project_id: int, name: str) -> Branch:
        """
        Get a branch together with its head commit.

        Args:
            project_id: Numeric project id
            name: Branch name (may contain slashes)
        """
        data = await self.transport.get_json(
            f"projects/{project_id}/repository/branches/{quote(name, safe='')}"
        )
        return Branch(
            name=require(data, "name", "branch"),
            commit=parse_commit(require(data, "commit", "branch")),
            merged=bool(data.get("merged", False)),
            protected=bool(data.get("protected", False)),
        )

    async def commits(self, project_id: int, ref: str, max_commits: int = 100) -> list[Commit]:
        """
        List the most recent commits reachable from ``ref``.

        Args:
            project_id: Numeric project id
            ref: Branch, tag or sha to list from
            max_commits: Bound on history retrieval; rounded up to whole pages

        Returns:
            Commits newest first
        """
        max_pages = max(1, math.ceil(max_commits / PAGE_SIZE))
        items = await self.transport.paginate(
            f"projects/{project_id}/repository/commits",
            params={"ref_name": ref},
            max_pages=max_pages,
        )
        return [parse_commit(item) for item in items]

    async def file_raw(self, project_id: int, file_path: str, ref: str) -> bytes:
        """
        Download a file from the repository.

        Args:
            project_id: Numeric project id
            file_path: Path of the file inside the repository
            ref: Branch, tag or sha to read from

        Returns:
            The raw file content
        """
        return await self.transport.get_bytes(
            f"projects/{project_id}/repository/files/{quote(file_path, safe='')}/raw",
            params={"ref": ref},
        )

    def _parse_project(self, data: dict[str, Any]) -> Project:
        return Project(
            id=int(require(data, "id", "project")),
            name=data.get("name") or "",
            path_with_namespace=data.get("path_with_namespace") or "",
            default_branch=data.get("default_branch"),
            web_url=require(data, "web_url", "project"),
            description=data.get("description"),
        )
