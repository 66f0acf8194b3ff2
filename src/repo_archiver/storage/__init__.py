"""Storage for the transition log files."""

from repo_archiver.storage.paths import LogPaths
from repo_archiver.storage.writer import (
    JSONRecordLog,
    LogWriteError,
    MarkdownTableLog,
    TransitionLogSink,
)

__all__ = [
    "JSONRecordLog",
    "LogPaths",
    "LogWriteError",
    "MarkdownTableLog",
    "TransitionLogSink",
]
