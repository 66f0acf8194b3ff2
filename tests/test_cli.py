"""Tests for the repo-archiver CLI."""

import locale
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from conftest import NOW, TEST_TOKEN, make_repo
from repo_archiver import __version__
from repo_archiver.cli import main
from repo_archiver.config import Config
from repo_archiver.models import RunResult, TransitionAction, TransitionLogEntry
from repo_archiver.storage.writer import LogWriteError

CREDENTIAL_VARS = ("MY_GITHUB_USERNAME", "MY_GITHUB_TOKEN", "GITHUB_USERNAME", "GITHUB_TOKEN")


@pytest.fixture(autouse=True)
def setlocale() -> Iterator[MagicMock]:
    """Keep the CLI from changing the test process locale."""
    with patch("repo_archiver.cli.locale.setlocale") as mock:
        yield mock


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def env() -> dict[str, str | None]:
    """Environment with valid credentials and no other archiver settings."""
    return {
        "MY_GITHUB_USERNAME": "octocat",
        "MY_GITHUB_TOKEN": TEST_TOKEN,
        "GITHUB_USERNAME": None,
        "GITHUB_TOKEN": None,
        "STALE_MONTHS": None,
        "DISCORD_WEBHOOK_URL": None,
        "SLACK_WEBHOOK_URL": None,
        "ARCHIVE_LOG_DIR": None,
    }


@pytest.fixture
def run_result() -> RunResult:
    """A run with one archived repository."""
    repo = make_repo("old-tool", datetime(2023, 1, 1, tzinfo=UTC))
    result = RunResult(total_processed=4)
    result.record(TransitionLogEntry.for_repository(repo, TransitionAction.ARCHIVED, NOW.date()))
    return result


class TestCliOptions:
    """Tests for option handling."""

    def test_version(self, runner: CliRunner) -> None:
        """Test --version prints the package version."""
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_flags(self, runner: CliRunner) -> None:
        """Test --help documents the run flags."""
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        for flag in ("--dry-run", "--verbose", "--stale-months", "--config"):
            assert flag in result.output

    @pytest.mark.parametrize("value", ["abc", "-1"])
    def test_invalid_stale_months_is_usage_error(self, runner: CliRunner, value: str) -> None:
        """Test non-numeric or negative thresholds are rejected before running."""
        with patch("repo_archiver.cli.run_archiver", new_callable=AsyncMock) as run:
            result = runner.invoke(main, [f"--stale-months={value}"])

        assert result.exit_code == 2
        run.assert_not_called()


class TestCliRun:
    """Tests for running the archiver from the CLI."""

    def test_successful_run_prints_summary(
        self, runner: CliRunner, env: dict, run_result: RunResult
    ) -> None:
        """Test a run prints counts and exits 0."""
        with patch(
            "repo_archiver.cli.run_archiver", new_callable=AsyncMock, return_value=run_result
        ):
            result = runner.invoke(main, [], env=env)

        assert result.exit_code == 0, result.output
        assert "Total repositories processed: 4" in result.output
        assert "Repositories archived: 1" in result.output
        assert "Repositories unarchived: 0" in result.output

    def test_flags_are_forwarded(
        self, runner: CliRunner, env: dict, run_result: RunResult
    ) -> None:
        """Test --dry-run and --stale-months reach the orchestrator."""
        with patch(
            "repo_archiver.cli.run_archiver", new_callable=AsyncMock, return_value=run_result
        ) as run:
            result = runner.invoke(main, ["--dry-run", "--stale-months=5"], env=env)

        assert result.exit_code == 0, result.output
        config, = run.call_args.args
        assert isinstance(config, Config)
        assert config.github.username == "octocat"
        assert run.call_args.kwargs == {"dry_run": True, "stale_months": 5}
        assert "Dry run" in result.output

    def test_verbose_shows_transition_table(
        self, runner: CliRunner, env: dict, run_result: RunResult
    ) -> None:
        """Test --verbose renders the transitions."""
        with patch(
            "repo_archiver.cli.run_archiver", new_callable=AsyncMock, return_value=run_result
        ):
            result = runner.invoke(main, ["--verbose"], env=env)

        assert result.exit_code == 0, result.output
        assert "old-tool" in result.output

    def test_no_actions_message(self, runner: CliRunner, env: dict) -> None:
        """Test an empty run says nothing was done."""
        with patch(
            "repo_archiver.cli.run_archiver",
            new_callable=AsyncMock,
            return_value=RunResult(total_processed=2),
        ):
            result = runner.invoke(main, [], env=env)

        assert result.exit_code == 0
        assert "No archive/unarchive actions were performed." in result.output

    def test_missing_credentials_exit_1(self, runner: CliRunner, env: dict) -> None:
        """Test missing credentials abort before any network call."""
        env = {**env, **{name: None for name in CREDENTIAL_VARS}}

        with (
            runner.isolated_filesystem(),
            patch("repo_archiver.cli.run_archiver", new_callable=AsyncMock) as run,
        ):
            result = runner.invoke(main, [], env=env)

        assert result.exit_code == 1
        assert "Configuration error" in result.output
        run.assert_not_called()

    def test_config_file_option(
        self, runner: CliRunner, env: dict, run_result: RunResult, tmp_path: Path
    ) -> None:
        """Test --config loads the YAML file."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("policy:\n  stale_months: 7\n")

        with patch(
            "repo_archiver.cli.run_archiver", new_callable=AsyncMock, return_value=run_result
        ) as run:
            result = runner.invoke(main, ["--config", str(config_file)], env=env)

        assert result.exit_code == 0, result.output
        assert run.call_args.args[0].policy.stale_months == 7

    def test_log_write_error_exit_1(self, runner: CliRunner, env: dict) -> None:
        """Test an unwritable log file fails the process."""
        error = LogWriteError(Path("ARCHIVED_REPOS.md"), PermissionError("denied"))

        with patch("repo_archiver.cli.run_archiver", new_callable=AsyncMock, side_effect=error):
            result = runner.invoke(main, [], env=env)

        assert result.exit_code == 1
        assert "Failed to write ARCHIVED_REPOS.md" in result.output

    def test_unexpected_error_exit_1(self, runner: CliRunner, env: dict) -> None:
        """Test an unhandled fault in the run exits 1."""
        with patch(
            "repo_archiver.cli.run_archiver",
            new_callable=AsyncMock,
            side_effect=RuntimeError("boom"),
        ):
            result = runner.invoke(main, [], env=env)

        assert result.exit_code == 1
        assert "boom" in result.output

    def test_dates_follow_user_locale(
        self, runner: CliRunner, env: dict, run_result: RunResult, setlocale: MagicMock
    ) -> None:
        """Test the run adopts the environment's LC_TIME locale."""
        with patch(
            "repo_archiver.cli.run_archiver", new_callable=AsyncMock, return_value=run_result
        ):
            result = runner.invoke(main, [], env=env)

        assert result.exit_code == 0, result.output
        setlocale.assert_called_once_with(locale.LC_TIME, "")

    def test_unknown_locale_is_not_fatal(
        self, runner: CliRunner, env: dict, run_result: RunResult, setlocale: MagicMock
    ) -> None:
        """Test an unsupported locale only prints a warning."""
        setlocale.side_effect = locale.Error("unsupported locale setting")

        with patch(
            "repo_archiver.cli.run_archiver", new_callable=AsyncMock, return_value=run_result
        ):
            result = runner.invoke(main, [], env=env)

        assert result.exit_code == 0, result.output
        assert "Locale unavailable" in result.output
