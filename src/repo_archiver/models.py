"""Data models for repository snapshots and archival transitions."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

TIMESTAMP_FIELDS = ("pushed_at", "created_at")


def parse_github_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO 8601 timestamp into an aware datetime.

    Args:
        value: Timestamp such as "2024-06-14T15:30:00Z".

    Returns:
        Timezone-aware datetime. Naive values are taken to be UTC.

    Raises:
        ValueError: If the value is not a valid ISO 8601 timestamp.
    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass(frozen=True)
class RepositoryRecord:
    """Snapshot of a repository fetched once per run.

    Attributes:
        name: Repository name (without owner).
        last_pushed_at: Timestamp of the most recent push.
        is_archived: Whether the repository was archived when fetched.
        url: Web URL of the repository.
    """

    name: str
    last_pushed_at: datetime
    is_archived: bool
    url: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Optional["RepositoryRecord"]:
        """Build a record from a GitHub REST repository object.

        ``created_at`` stands in when ``pushed_at`` is absent or unparsable.

        Args:
            data: Repository dictionary from the GitHub API.

        Returns:
            RepositoryRecord, or None if the object has no usable timestamp.
        """
        name = data.get("name")
        if not name:
            logger.warning("Skipping repository without a name")
            return None

        last_pushed_at = None
        for key in TIMESTAMP_FIELDS:
            raw_timestamp = data.get(key)
            if not raw_timestamp:
                continue
            try:
                last_pushed_at = parse_github_timestamp(raw_timestamp)
                break
            except (ValueError, AttributeError):
                logger.warning("Ignoring invalid %s for %s: %r", key, name, raw_timestamp)

        if last_pushed_at is None:
            logger.warning("Skipping %s: no usable pushed_at or created_at", name)
            return None

        return cls(
            name=name,
            last_pushed_at=last_pushed_at,
            is_archived=bool(data.get("archived", False)),
            url=data.get("html_url", ""),
        )


class TransitionAction(str, Enum):
    """Archival state change applied to a repository."""

    ARCHIVED = "archived"
    UNARCHIVED = "unarchived"


class TransitionLogEntry(BaseModel):
    """One archive or unarchive event, appended to the logs and never mutated."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    repo_name: str
    repo_url: str
    last_pushed: datetime
    event_date: date
    action: TransitionAction

    @classmethod
    def for_repository(
        cls,
        repo: RepositoryRecord,
        action: TransitionAction,
        event_date: date,
    ) -> "TransitionLogEntry":
        """Create an entry describing a transition of ``repo``."""
        return cls(
            repo_name=repo.name,
            repo_url=repo.url,
            last_pushed=repo.last_pushed_at,
            event_date=event_date,
            action=action,
        )

    def to_record(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON structure used by the record file."""
        return self.model_dump(mode="json", by_alias=True)


@dataclass
class RunResult:
    """Outcome of one run of the transition engine."""

    total_processed: int = 0
    archived_count: int = 0
    unarchived_count: int = 0
    entries: list[TransitionLogEntry] = field(default_factory=list)

    @property
    def has_transitions(self) -> bool:
        """True when the run recorded at least one transition."""
        return bool(self.entries)

    def record(self, entry: TransitionLogEntry) -> None:
        """Append an entry and bump the matching counter."""
        self.entries.append(entry)
        if entry.action is TransitionAction.ARCHIVED:
            self.archived_count += 1
        else:
            self.unarchived_count += 1
