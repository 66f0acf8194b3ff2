"""GitHub HTTP client.

Async HTTP client for the GitHub API. Every request is attempted exactly once;
callers decide what a failed response means for them.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from repo_archiver import __version__
from repo_archiver.github.auth import GitHubAuth

logger = logging.getLogger(__name__)


@dataclass
class GitHubResponse:
    """GitHub API response with parsed data and metadata."""

    status_code: int
    data: Any
    headers: httpx.Headers
    url: str = ""

    @property
    def is_success(self) -> bool:
        """Check if response was successful (2xx status code)."""
        return 200 <= self.status_code < 300


class GitHubHTTPError(Exception):
    """Raised when a request could not be completed."""


class GitHubClient:
    """Async HTTP client for the GitHub API.

    Use as an async context manager so the underlying connection pool is
    closed at the end of a run:

        async with GitHubClient(auth) as client:
            response = await client.get("/users/octocat/repos")
    """

    BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        auth: GitHubAuth,
        timeout: float = DEFAULT_TIMEOUT,
        base_url: str = BASE_URL,
    ) -> None:
        """Initialize GitHub HTTP client.

        Args:
            auth: GitHubAuth instance providing the Authorization header.
            timeout: Request timeout in seconds.
            base_url: Base URL for the GitHub API.
        """
        self._auth = auth
        self._timeout = timeout
        self._base_url = base_url.rstrip("/")

        self._client: httpx.AsyncClient | None = None

    def _get_headers(self) -> dict[str, str]:
        """Get headers for API requests."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": f"repo-archiver/{__version__}",
        }
        headers.update(self._auth.get_authorization_header())
        return headers

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure async client is initialized.

        Returns:
            Active httpx.AsyncClient instance.
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                headers=self._get_headers(),
                follow_redirects=True,
            )
        return self._client

    async def request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> GitHubResponse:
        """Make a single HTTP request to the GitHub API.

        Non-2xx responses are returned, not raised; check ``is_success``.

        Args:
            method: HTTP method (GET, PATCH, etc.).
            path: API path (e.g., "/users/octocat/repos").
            **kwargs: Additional arguments passed to httpx (params, json, etc.).

        Returns:
            GitHubResponse with parsed data and metadata.

        Raises:
            GitHubHTTPError: On timeout or network failure.
        """
        client = await self._ensure_client()

        logger.debug("%s %s", method, path)

        try:
            response = await client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise GitHubHTTPError(f"Request timeout for {method} {path}: {e}") from e
        except httpx.HTTPError as e:
            raise GitHubHTTPError(f"Network error for {method} {path}: {e}") from e

        if not response.is_success:
            logger.debug(
                "%s %s returned %d: %s",
                method,
                path,
                response.status_code,
                response.text,
            )

        data = None
        if response.content:
            try:
                data = response.json()
            except ValueError as e:
                logger.warning("Failed to parse JSON response: %s", e)
                data = response.text

        return GitHubResponse(
            status_code=response.status_code,
            data=data,
            headers=response.headers,
            url=str(response.url),
        )

    async def get(self, path: str, **kwargs: Any) -> GitHubResponse:
        """Make a GET request."""
        return await self.request("GET", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> GitHubResponse:
        """Make a PATCH request."""
        return await self.request("PATCH", path, **kwargs)

    async def close(self) -> None:
        """Close the HTTP client and cleanup resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "GitHubClient":
        """Async context manager entry."""
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
