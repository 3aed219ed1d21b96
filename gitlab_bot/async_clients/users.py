"""Async users resource client."""

from typing import TYPE_CHECKING, Any

from gitlab_bot.async_clients._parsing import require
from gitlab_bot.types.users import User

if TYPE_CHECKING:
    from gitlab_bot.async_transport import AsyncHTTPTransport


class AsyncUsersClient:
    """Async client for user operations."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def current(self) -> User:
        """
        Get the user the access token belongs to.

        Returns:
            The bot's own user record
        """
        data = await self.transport.get_json("user")
        return self._parse_user(data)

    def _parse_user(self, data: dict[str, Any]) -> User:
        return User(
            id=int(require(data, "id", "user")),
            username=require(data, "username", "user"),
            name=data.get("name"),
            state=data.get("state") or "active",
            web_url=data.get("web_url"),
        )
