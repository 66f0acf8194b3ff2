"""Repository source backed by the GitHub REST API.

Failures never propagate out of this module: a failed listing yields an
empty list and a failed mutation yields False, so one bad call cannot abort
a run.
"""

import logging

from repo_archiver.github.http import GitHubHTTPError
from repo_archiver.github.rest import RestClient
from repo_archiver.models import RepositoryRecord

logger = logging.getLogger(__name__)


class RepositorySource:
    """Fetches and mutates the repositories owned by one account."""

    def __init__(self, rest: RestClient, owner: str) -> None:
        self._rest = rest
        self.owner = owner

    async def list_repositories(self) -> list[RepositoryRecord]:
        """Fetch repository snapshots for the owner.

        Returns:
            Records in API order, or an empty list if the listing failed.
        """
        try:
            items = await self._rest.list_user_repos(self.owner)
        except GitHubHTTPError as e:
            logger.error("Failed to fetch repositories: %s", e)
            return []

        records = []
        for item in items:
            record = RepositoryRecord.from_api(item)
            if record is not None:
                records.append(record)

        logger.info("Fetched %d repositories for %s", len(records), self.owner)
        return records

    async def archive(self, repo: RepositoryRecord) -> bool:
        """Archive a repository. Returns True on success."""
        return await self._set_archived(repo, archived=True)

    async def unarchive(self, repo: RepositoryRecord) -> bool:
        """Unarchive a repository. Returns True on success."""
        return await self._set_archived(repo, archived=False)

    async def _set_archived(self, repo: RepositoryRecord, archived: bool) -> bool:
        verb = "archive" if archived else "unarchive"
        try:
            await self._rest.set_archived(self.owner, repo.name, archived)
        except GitHubHTTPError as e:
            logger.error("Failed to %s %s: %s", verb, repo.name, e)
            return False

        logger.info("%sd repository: %s", verb.capitalize(), repo.name)
        return True
