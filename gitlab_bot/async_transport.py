"""
Async HTTP Transport for gitlab-bot.

Handles async HTTP communication with the GitLab REST API (v4): token
authentication, page-based pagination and error handling using the httpx
async client. Requests are never retried; any non-success status is
terminal for that call.
"""

import json
import time
from typing import Any

import httpx

from gitlab_bot.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DecodeError,
    GitLabBotError,
    MissingDataError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from gitlab_bot.logging import log_http_request, log_http_response

TOTAL_PAGES_HEADER = "x-total-pages"
PAGE_SIZE = 100


class AsyncHTTPTransport:
    """
    Async HTTP transport layer for the GitLab API.

    Handles:
    - ``PRIVATE-TOKEN`` authentication on every request
    - Sequential page-based pagination driven by ``x-total-pages``
    - Full-body accumulation for raw file and trace downloads
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize async HTTP transport.

        Args:
            base_url: GitLab instance URL (e.g., "https://gitlab.example.com")
            token: Personal or project access token of the bot account
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used to stub the network in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}/api/v4/"
        self.timeout = timeout

        self._client = httpx.AsyncClient(
            base_url=self.api_url,
            timeout=timeout,
            headers={"PRIVATE-TOKEN": token},
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Send a request and check its status.

        Args:
            method: HTTP method
            path: API path relative to ``/api/v4/`` (e.g., "projects/1")
            params: Query parameters
            body: JSON request body (for POST/PUT)

        Returns:
            The successful response, body fully read

        Raises:
            GitLabBotError: On connection failure or a non-success status
        """
        if path.startswith("/"):
            raise ValueError(f"Invalid path {path!r}: must not start with /")

        log_http_request(method, f"{self.api_url}{path}", body=body)
        started = time.monotonic()
        try:
            response = await self._client.request(method, path, params=params, json=body)
        except httpx.RequestError as e:
            raise ServerError("CONNECTION_ERROR", str(e)) from e

        log_http_response(
            response.status_code,
            str(response.request.url),
            elapsed_ms=(time.monotonic() - started) * 1000,
        )

        if not response.is_success:
            raise self._parse_error_response(response)
        return response

    async def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET a JSON document."""
        response = await self.request("GET", path, params=params)
        return self._decode_json(response)

    async def get_bytes(self, path: str, params: dict[str, Any] | None = None) -> bytes:
        """GET a raw body, accumulated in full."""
        response = await self.request("GET", path, params=params)
        return response.content

    async def get_text(self, path: str, params: dict[str, Any] | None = None) -> str:
        """GET a UTF-8 text body, accumulated in full."""
        data = await self.get_bytes(path, params=params)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Response from {path} is not valid UTF-8: {e}") from e

    async def send_json(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Send a write request (POST, PUT, DELETE).

        Returns:
            Parsed JSON response, or None when the response has no body
        """
        response = await self.request(method, path, body=body)
        if not response.content:
            return None
        return self._decode_json(response)

    async def paginate(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        max_pages: int | None = None,
    ) -> list[Any]:
        """
        Load all pages of a paginated list.

        The first response must carry an ``x-total-pages`` header. Pages
        ``2..min(total, max_pages)`` are then requested one after another and
        the items are concatenated in page order.

        Args:
            path: API path of the collection
            params: Query parameters for every page
            max_pages: Upper bound on the number of pages retrieved (default: all)

        Returns:
            Items of all retrieved pages

        Raises:
            MissingDataError: If the first response lacks a usable page count
            GitLabBotError: On any failed page request
        """
        base_params = {**(params or {}), "per_page": PAGE_SIZE}

        response = await self.request("GET", path, params=base_params)
        total_pages = self._total_pages(response, path)
        items = self._decode_list(response, path)

        last_page = total_pages if max_pages is None else min(total_pages, max_pages)
        for page in range(2, last_page + 1):
            page_response = await self.request("GET", path, params={**base_params, "page": page})
            items.extend(self._decode_list(page_response, path))

        return items

    def _total_pages(self, response: httpx.Response, path: str) -> int:
        raw = response.headers.get(TOTAL_PAGES_HEADER)
        if raw is None:
            raise MissingDataError(f"Missing {TOTAL_PAGES_HEADER} header for {path}")
        try:
            return int(raw)
        except ValueError as e:
            raise MissingDataError(f"Invalid {TOTAL_PAGES_HEADER} header for {path}: {raw!r}") from e

    def _decode_json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"Malformed JSON from {response.request.url}: {e}") from e

    def _decode_list(self, response: httpx.Response, path: str) -> list[Any]:
        data = self._decode_json(response)
        if not isinstance(data, list):
            raise DecodeError(f"Expected a JSON list from {path}, got {type(data).__name__}")
        return data

    def _parse_error_response(self, response: httpx.Response) -> GitLabBotError:
        """
        Parse an error response into a typed exception.

        GitLab reports errors as ``{"message": ...}`` or ``{"error": ...}``
        where the message may itself be a string, list or mapping.
        """
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        detail = data.get("message") or data.get("error") or f"HTTP {response.status_code}"
        if not isinstance(detail, str):
            detail = json.dumps(detail, sort_keys=True)
        message = f"{response.request.method} {response.request.url.path}: {detail}"

        status_code = response.status_code
        code = f"HTTP_{status_code}"

        if status_code == 401:
            return AuthenticationError(code, message, status_code)
        elif status_code == 403:
            return AuthorizationError(code, message, status_code)
        elif status_code == 404:
            return NotFoundError(code, message, status_code)
        elif status_code == 409:
            return ConflictError(code, message, status_code)
        elif status_code == 429:
            retry_after_str = response.headers.get("Retry-After", "60")
            try:
                retry_after = int(retry_after_str)
            except ValueError:
                retry_after = 60
            return RateLimitedError(code, message, retry_after, status_code)
        elif status_code >= 500:
            return ServerError(code, message, status_code)
        else:
            return ValidationError(code, message, status_code)
