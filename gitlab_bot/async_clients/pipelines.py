"""Async pipelines and jobs resource client."""

from typing import TYPE_CHECKING, Any

from gitlab_bot.async_clients._parsing import parse_optional_datetime, require
from gitlab_bot.types.pipelines import Job

if TYPE_CHECKING:
    from gitlab_bot.async_transport import AsyncHTTPTransport


class AsyncPipelinesClient:
    """Async client for CI pipeline and job operations."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def jobs(self, project_id: int, pipeline_id: int) -> list[Job]:
        """
        List all jobs of a pipeline, following pagination.

        Args:
            project_id: Numeric project id
            pipeline_id: Pipeline id

        Returns:
            List of Job objects
        """
        items = await self.transport.paginate(
            f"projects/{project_id}/pipelines/{pipeline_id}/jobs",
        )
        return [self._parse_job(item) for item in items]

    async def job_trace(self, project_id: int, job_id: int) -> str:
        """
        Get the full log output of a job.

        Returns:
            The trace as text
        """
        return await self.transport.get_text(f"projects/{project_id}/jobs/{job_id}/trace")

    def _parse_job(self, data: dict[str, Any]) -> Job:
        return Job(
            id=int(require(data, "id", "job")),
            name=require(data, "name", "job"),
            status=require(data, "status", "job"),
            stage=data.get("stage") or "",
            ref=data.get("ref") or "",
            created_at=parse_optional_datetime(data.get("created_at")),
            started_at=parse_optional_datetime(data.get("started_at")),
            finished_at=parse_optional_datetime(data.get("finished_at")),
        )
