"""Writers for the transition logs.

Two files record every transition:
- a Markdown table that is only ever appended to, and
- a JSON array that is read, extended and rewritten in full.

Neither writer locks its file; a single writer per run is assumed.
"""

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from repo_archiver.models import TransitionLogEntry

logger = logging.getLogger(__name__)

TABLE_HEADER = (
    "# Repository Archive/Unarchive Log\n\n"
    "This log records repositories that were archived due to inactivity or "
    "unarchived because they received recent updates.\n\n"
    "| Repository | Last Pushed | Event Date | Action |\n"
    "|------------|-------------|------------|--------|\n"
)

DEFAULT_DATE_FORMAT = "%x"


class LogWriteError(Exception):
    """Raised when a log file cannot be written."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to write {path}: {cause}")


class MarkdownTableLog:
    """Append-only Markdown table of transitions.

    A new file starts with ``TABLE_HEADER``. An existing file is never read or
    validated; new rows are appended after whatever bytes it already holds.
    """

    def __init__(self, path: Path, date_format: str = DEFAULT_DATE_FORMAT) -> None:
        self.path = path
        self.date_format = date_format

    def render_row(self, entry: TransitionLogEntry) -> str:
        """Render one entry as a table row (no trailing newline)."""
        last_pushed = entry.last_pushed.strftime(self.date_format)
        event_date = entry.event_date.strftime(self.date_format)
        return (
            f"| [{entry.repo_name}]({entry.repo_url}) | {last_pushed} "
            f"| {event_date} | {entry.action.value} |"
        )

    def append(self, entries: Sequence[TransitionLogEntry]) -> None:
        """Append rows for ``entries``, writing the header on first use.

        Raises:
            LogWriteError: If the file cannot be written.
        """
        rows = "".join(f"{self.render_row(entry)}\n" for entry in entries)
        try:
            if self.path.exists():
                with self.path.open("a", encoding="utf-8") as f:
                    f.write(rows)
            else:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text(TABLE_HEADER + rows, encoding="utf-8")
        except OSError as e:
            raise LogWriteError(self.path, e) from e

        logger.info("Updated %s with %d log entries", self.path.name, len(entries))


class JSONRecordLog:
    """Full history of transitions stored as a pretty-printed JSON array."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def read(self) -> list[Any]:
        """Read existing records.

        Returns:
            The stored records, or an empty list if the file is missing or
            does not hold a JSON array. Unreadable content is logged and
            dropped on the next write.
        """
        if not self.path.exists():
            return []

        try:
            with self.path.open(encoding="utf-8") as f:
                records = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Error reading existing JSON log file %s: %s", self.path, e)
            return []

        if not isinstance(records, list):
            logger.warning("Ignoring %s: expected a JSON array", self.path)
            return []

        return records

    def append(self, entries: Sequence[TransitionLogEntry]) -> None:
        """Concatenate ``entries`` to the stored records and rewrite the file.

        Raises:
            LogWriteError: If the file cannot be written.
        """
        records = self.read() + [entry.to_record() for entry in entries]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as f:
                json.dump(records, f, indent=2)
        except OSError as e:
            raise LogWriteError(self.path, e) from e

        logger.info("Updated %s with %d log entries", self.path.name, len(entries))


class TransitionLogSink:
    """Writes a run's entries to both the table file and the record file."""

    def __init__(self, table: MarkdownTableLog, records: JSONRecordLog) -> None:
        self.table = table
        self.records = records

    def append_entries(self, entries: Sequence[TransitionLogEntry]) -> None:
        """Append entries to both logs.

        Both files are attempted even if the first one fails; the first
        failure is raised afterwards.

        Raises:
            LogWriteError: If either file cannot be written.
        """
        if not entries:
            return

        first_error: LogWriteError | None = None
        for log in (self.table, self.records):
            try:
                log.append(entries)
            except LogWriteError as e:
                logger.error("%s", e)
                first_error = first_error or e

        if first_error is not None:
            raise first_error
