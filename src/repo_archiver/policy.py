"""Staleness policy for repository archival.

A repository is stale when its last push happened before a cutoff that lies a
whole number of calendar months in the past. Month arithmetic uses
``relativedelta`` so the cutoff for "2 months before 2024-04-30" is
2024-02-29, not a fixed 60-day offset.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from dateutil.relativedelta import relativedelta

DEFAULT_STALE_MONTHS = 2


@dataclass(frozen=True)
class ArchivePolicy:
    """Run-wide policy applied by the transition engine.

    Attributes:
        stale_months: Months of inactivity after which a repository is stale.
        dry_run: Record intended transitions without calling the API.
    """

    stale_months: int = DEFAULT_STALE_MONTHS
    dry_run: bool = False

    def __post_init__(self) -> None:
        if self.stale_months < 0:
            msg = f"stale_months must be >= 0, got {self.stale_months}"
            raise ValueError(msg)


def stale_cutoff(stale_months: int, now: datetime | None = None) -> datetime:
    """Compute the instant before which a push counts as stale.

    Args:
        stale_months: Threshold in calendar months. Must not be negative.
        now: Reference instant. Defaults to the current UTC time.

    Returns:
        ``now`` minus ``stale_months`` calendar months.

    Raises:
        ValueError: If stale_months is negative.
    """
    if stale_months < 0:
        msg = f"stale_months must be >= 0, got {stale_months}"
        raise ValueError(msg)

    reference = now or datetime.now(UTC)
    return reference - relativedelta(months=stale_months)


def is_stale(
    last_pushed_at: datetime,
    stale_months: int,
    now: datetime | None = None,
) -> bool:
    """Check whether a repository's last push precedes the staleness cutoff.

    Args:
        last_pushed_at: Timestamp of the last push (timezone-aware, UTC).
        stale_months: Threshold in calendar months.
        now: Reference instant. Defaults to the current UTC time.

    Returns:
        True if ``last_pushed_at`` is strictly before the cutoff.
    """
    return last_pushed_at < stale_cutoff(stale_months, now)
