"""
gitlab-bot async GitLab client.

Aggregates the async resource clients behind a single authenticated
transport.
"""

from typing import Any

import httpx

from gitlab_bot.async_clients import (
    AsyncMergeRequestsClient,
    AsyncPipelinesClient,
    AsyncProjectsClient,
    AsyncUsersClient,
)
from gitlab_bot.async_transport import AsyncHTTPTransport
from gitlab_bot.config import BotConfig


class AsyncGitLabClient:
    """
    Async client for the GitLab REST API.

    Uses httpx for async HTTP operations. Every call suspends only the
    calling task, so many merge requests can be inspected concurrently on
    one event loop.

    Example:
        ```python
        import asyncio
        from gitlab_bot import AsyncGitLabClient

        async def main():
            async with AsyncGitLabClient(
                base_url="https://gitlab.example.com",
                token="glpat-...",
            ) as client:
                me = await client.users.current()
                for mr in await client.merge_requests.list_open():
                    print(me.username, mr.title)

        asyncio.run(main())
        ```
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the async GitLab client.

        Args:
            base_url: GitLab instance URL
            token: Access token of the bot account
            timeout: Request timeout in seconds (default: 30.0)
            transport: Optional httpx transport override (tests)
        """
        self.base_url = base_url
        self.timeout = timeout

        self._transport = AsyncHTTPTransport(
            base_url=base_url,
            token=token,
            timeout=timeout,
            transport=transport,
        )

        self.users = AsyncUsersClient(self._transport)
        self.projects = AsyncProjectsClient(self._transport)
        self.merge_requests = AsyncMergeRequestsClient(self._transport)
        self.pipelines = AsyncPipelinesClient(self._transport)

    @classmethod
    def from_config(cls, config: BotConfig) -> "AsyncGitLabClient":
        """Create a client from a BotConfig."""
        return cls(base_url=config.endpoint, token=config.token, timeout=config.timeout)

    @property
    def transport(self) -> AsyncHTTPTransport:
        """Get the underlying async HTTP transport (for advanced use cases)."""
        return self._transport

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._transport.close()

    async def __aenter__(self) -> "AsyncGitLabClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
