"""GitHub REST API endpoints used by the archiver."""

import logging
from typing import Any

from repo_archiver.github.http import GitHubClient, GitHubHTTPError

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


class FetchError(GitHubHTTPError):
    """Raised when the repository listing could not be fetched."""


class MutationError(GitHubHTTPError):
    """Raised when a repository's archived flag could not be changed."""


class RestClient:
    """Thin wrapper over GitHubClient exposing the archiver's endpoints.

    Only the first page of results is requested; accounts with more than
    ``PAGE_SIZE`` repositories are partially covered.
    """

    def __init__(self, http_client: GitHubClient) -> None:
        """Initialize REST API client.

        Args:
            http_client: GitHubClient instance for HTTP requests.
        """
        self._http = http_client

    async def list_user_repos(self, username: str) -> list[dict[str, Any]]:
        """List repositories owned by a user (first page only).

        Args:
            username: GitHub username.

        Returns:
            Repository dictionaries as returned by the API.

        Raises:
            FetchError: If the API answers with a non-2xx status or a non-list body.
            GitHubHTTPError: On transport failure.
        """
        path = f"/users/{username}/repos"
        params = {"type": "owner", "per_page": PAGE_SIZE}

        logger.info("Fetching repositories for user: %s", username)
        response = await self._http.get(path, params=params)

        if not response.is_success:
            msg = f"Listing repositories for {username} failed with status {response.status_code}"
            raise FetchError(msg)

        if not isinstance(response.data, list):
            msg = f"Unexpected response body for {path}: {type(response.data).__name__}"
            raise FetchError(msg)

        return response.data

    async def set_archived(self, owner: str, repo: str, archived: bool) -> dict[str, Any]:
        """Set the archived flag of a repository.

        Args:
            owner: Repository owner.
            repo: Repository name.
            archived: New archived state.

        Returns:
            Updated repository dictionary.

        Raises:
            MutationError: If the API answers with a non-2xx status.
            GitHubHTTPError: On transport failure.
        """
        path = f"/repos/{owner}/{repo}"
        response = await self._http.patch(path, json={"archived": archived})

        if not response.is_success:
            msg = (
                f"Setting archived={archived} on {owner}/{repo} failed "
                f"with status {response.status_code}"
            )
            raise MutationError(msg)

        return response.data if isinstance(response.data, dict) else {}
