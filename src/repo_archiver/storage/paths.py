"""Path management for the transition log files."""

from pathlib import Path

from repo_archiver.config import Config


class LogPaths:
    """Resolves where the table file and the record file live.

    Both files sit directly under ``storage.root``:
    - Table: <root>/ARCHIVED_REPOS.md
    - Records: <root>/archive_log.json
    """

    def __init__(self, config: Config) -> None:
        """Initialize log paths from configuration.

        Args:
            config: Application configuration.
        """
        self.root = Path(config.storage.root)
        self._table_file = config.storage.table_file
        self._record_file = config.storage.record_file

    @property
    def table_path(self) -> Path:
        """Path to the human-readable Markdown table."""
        return self.root / self._table_file

    @property
    def record_path(self) -> Path:
        """Path to the machine-readable JSON record file."""
        return self.root / self._record_file
