"""Transition engine deciding and applying archive/unarchive actions."""

import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Protocol

from repo_archiver.models import (
    RepositoryRecord,
    RunResult,
    TransitionAction,
    TransitionLogEntry,
)
from repo_archiver.policy import ArchivePolicy, stale_cutoff

logger = logging.getLogger(__name__)


class RepositoryMutator(Protocol):
    """Remote calls that change a repository's archived flag.

    Both methods report failure by returning False instead of raising.
    """

    async def archive(self, repo: RepositoryRecord) -> bool: ...

    async def unarchive(self, repo: RepositoryRecord) -> bool: ...


def decide_action(repo: RepositoryRecord, cutoff: datetime) -> TransitionAction | None:
    """Pick the transition for a repository given the staleness cutoff.

    Args:
        repo: Repository snapshot.
        cutoff: Pushes strictly before this instant are stale.

    Returns:
        The action to apply, or None when the repository is already settled.
    """
    stale = repo.last_pushed_at < cutoff
    if not repo.is_archived and stale:
        return TransitionAction.ARCHIVED
    if repo.is_archived and not stale:
        return TransitionAction.UNARCHIVED
    return None


async def process_repositories(
    repositories: Sequence[RepositoryRecord],
    mutator: RepositoryMutator,
    policy: ArchivePolicy,
    now: datetime | None = None,
) -> RunResult:
    """Archive stale repositories and unarchive ones with renewed activity.

    Repositories are handled one at a time in input order. A failed mutation
    skips that repository only; no entry is recorded for it and the loop
    continues. In dry-run mode the mutator is never called and every intended
    transition is recorded as if it had succeeded.

    Args:
        repositories: Snapshots fetched for this run.
        mutator: Performs the remote archive/unarchive calls.
        policy: Staleness threshold and dry-run flag.
        now: Reference instant for the whole run. Defaults to current UTC time.

    Returns:
        RunResult with counters and entries in discovery order.
    """
    now = now or datetime.now(UTC)
    cutoff = stale_cutoff(policy.stale_months, now)
    event_date = now.date()
    result = RunResult(total_processed=len(repositories))

    logger.debug(
        "Evaluating %d repositories against cutoff %s",
        len(repositories),
        cutoff.isoformat(),
    )

    for repo in repositories:
        logger.debug("Processing repository: %s", repo.name)

        action = decide_action(repo, cutoff)
        if action is None:
            continue

        verb = "archive" if action is TransitionAction.ARCHIVED else "unarchive"
        if policy.dry_run:
            logger.info("[Dry Run] Would %s repository: %s", verb, repo.name)
        else:
            call = mutator.archive if action is TransitionAction.ARCHIVED else mutator.unarchive
            if not await call(repo):
                logger.debug("Skipping %s after failed %s", repo.name, verb)
                continue

        result.record(TransitionLogEntry.for_repository(repo, action, event_date))

    return result
