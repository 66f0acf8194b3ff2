"""Run orchestrator.

Coordinates one run: fetch repositories, apply the transition engine, append
the resulting entries to the log files and send the summary notification.
"""

import logging
from datetime import datetime

from repo_archiver.config import Config
from repo_archiver.engine import process_repositories
from repo_archiver.github.auth import GitHubAuth
from repo_archiver.github.http import GitHubClient
from repo_archiver.github.rest import RestClient
from repo_archiver.models import RunResult
from repo_archiver.notify import WebhookNotifier, format_summary
from repo_archiver.policy import ArchivePolicy
from repo_archiver.source import RepositorySource
from repo_archiver.storage.paths import LogPaths
from repo_archiver.storage.writer import (
    JSONRecordLog,
    LogWriteError,
    MarkdownTableLog,
    TransitionLogSink,
)

logger = logging.getLogger(__name__)


def build_log_sink(config: Config) -> TransitionLogSink:
    """Create the log sink for the configured storage location."""
    paths = LogPaths(config)
    return TransitionLogSink(
        table=MarkdownTableLog(paths.table_path, config.storage.date_format),
        records=JSONRecordLog(paths.record_path),
    )


async def run_archiver(
    config: Config,
    dry_run: bool = False,
    stale_months: int | None = None,
    now: datetime | None = None,
) -> RunResult:
    """Execute one archival run.

    Args:
        config: Validated configuration.
        dry_run: Record intended transitions without changing remote state.
        stale_months: Override for ``config.policy.stale_months``.
        now: Reference instant for staleness. Defaults to current UTC time.

    Returns:
        RunResult of the run.

    Raises:
        LogWriteError: If the log files could not be written. The
            notification has already been attempted when this is raised.
    """
    policy = ArchivePolicy(
        stale_months=config.policy.stale_months if stale_months is None else stale_months,
        dry_run=dry_run,
    )
    logger.info(
        "Starting run for %s (stale after %d months%s)",
        config.github.username,
        policy.stale_months,
        ", dry run" if dry_run else "",
    )

    auth = GitHubAuth(config.github.token)
    async with GitHubClient(
        auth,
        timeout=config.github.timeout,
        base_url=config.github.base_url,
    ) as http_client:
        source = RepositorySource(RestClient(http_client), config.github.username)
        repositories = await source.list_repositories()
        result = await process_repositories(repositories, source, policy, now=now)

    write_error: LogWriteError | None = None
    if result.has_transitions:
        try:
            build_log_sink(config).append_entries(result.entries)
        except LogWriteError as e:
            write_error = e
    else:
        logger.info("No archive/unarchive actions were performed.")

    await WebhookNotifier(config.notification).notify(format_summary(result, dry_run))

    if write_error is not None:
        raise write_error

    return result
