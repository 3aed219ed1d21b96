"""Async merge requests resource client.

Covers the merge request list, its commits, its pipelines and its notes
(comments), including note create/update/delete.
"""

from typing import TYPE_CHECKING, Any

from gitlab_bot.async_clients._parsing import (
    parse_author,
    parse_commit,
    parse_datetime,
    parse_optional_datetime,
    require,
)
from gitlab_bot.exceptions import MissingDataError
from gitlab_bot.types.merge_requests import MergeRequest, Note
from gitlab_bot.types.pipelines import Pipeline
from gitlab_bot.types.projects import Commit

if TYPE_CHECKING:
    from gitlab_bot.async_transport import AsyncHTTPTransport


class AsyncMergeRequestsClient:
    """Async client for merge request operations."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the async merge requests client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def list_open(self) -> list[MergeRequest]:
        """
        List every open merge request visible to the bot, across all projects.

        Returns:
            List of MergeRequest objects
        """
        items = await self.transport.paginate(
            "merge_requests",
            params={"scope": "all", "state": "opened"},
        )
        return [self._parse_merge_request(item) for item in items]

    async def commits(self, project_id: int, iid: int) -> list[Commit]:
        """List the commits that make up a merge request."""
        items = await self.transport.paginate(
            f"projects/{project_id}/merge_requests/{iid}/commits",
        )
        return [parse_commit(item) for item in items]

    async def pipelines(self, project_id: int, iid: int) -> list[Pipeline]:
        """
        List the pipelines of a merge request.

        Returns:
            Pipelines, most recent first
        """
        items = await self.transport.get_json(
            f"projects/{project_id}/merge_requests/{iid}/pipelines",
        )
        return [self._parse_pipeline(item) for item in items]

    async def notes(self, project_id: int, iid: int) -> list[Note]:
        """
        List all notes (comments) of a merge request.

        Returns:
            Notes ordered newest first
        """
        items = await self.transport.paginate(
            f"projects/{project_id}/merge_requests/{iid}/notes",
            params={"order_by": "created_at", "sort": "desc"},
        )
        return [self._parse_note(item) for item in items]

    async def create_note(self, project_id: int, iid: int, body: str) -> Note:
        """
        Create a note on a merge request.

        Args:
            project_id: Numeric project id
            iid: Merge request iid within the project
            body: Markdown body

        Returns:
            The created note
        """
        data = await self.transport.send_json(
            "POST",
            f"projects/{project_id}/merge_requests/{iid}/notes",
            body={"body": body},
        )
        return self._parse_note(data)

    async def update_note(self, project_id: int, iid: int, note_id: int, body: str) -> Note:
        """
        Replace the body of an existing note.

        Returns:
            The updated note
        """
        data = await self.transport.send_json(
            "PUT",
            f"projects/{project_id}/merge_requests/{iid}/notes/{note_id}",
            body={"body": body},
        )
        return self._parse_note(data)

    async def delete_note(self, project_id: int, iid: int, note_id: int) -> None:
        """Delete a note."""
        await self.transport.send_json(
            "DELETE",
            f"projects/{project_id}/merge_requests/{iid}/notes/{note_id}",
        )

    def _parse_merge_request(self, data: dict[str, Any]) -> MergeRequest:
        """Parse merge request data from API response."""
        author = parse_author(require(data, "author", "merge request"))
        if author is None:
            raise MissingDataError("merge request payload has an empty 'author'")
        return MergeRequest(
            id=int(require(data, "id", "merge request")),
            iid=int(require(data, "iid", "merge request")),
            project_id=int(require(data, "project_id", "merge request")),
            title=require(data, "title", "merge request"),
            state=data.get("state") or "opened",
            source_branch=require(data, "source_branch", "merge request"),
            target_branch=require(data, "target_branch", "merge request"),
            author=author,
            assignee=parse_author(data.get("assignee")),
            updated_at=parse_datetime(require(data, "updated_at", "merge request")),
            web_url=data.get("web_url") or "",
            created_at=parse_optional_datetime(data.get("created_at")),
            description=data.get("description"),
            sha=data.get("sha"),
        )

    def _parse_note(self, data: dict[str, Any]) -> Note:
        """Parse note data from API response."""
        return Note(
            id=int(require(data, "id", "note")),
            body=data.get("body") or "",
            author=parse_author(data.get("author")),
            created_at=parse_datetime(require(data, "created_at", "note")),
            updated_at=parse_optional_datetime(data.get("updated_at")),
            system=bool(data.get("system", False)),
        )

    def _parse_pipeline(self, data: dict[str, Any]) -> Pipeline:
        return Pipeline(
            id=int(require(data, "id", "pipeline")),
            sha=data.get("sha") or "",
            ref=data.get("ref") or "",
            status=require(data, "status", "pipeline"),
            web_url=data.get("web_url"),
        )
