"""CLI entry point for repo-archiver.

Archives repositories that have not been pushed to within the stale
threshold and unarchives archived repositories that received new pushes.
"""

import asyncio
import locale
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from repo_archiver import __version__
from repo_archiver.config import ConfigError, load_config
from repo_archiver.logging import setup_logging
from repo_archiver.models import RunResult
from repo_archiver.orchestrator import run_archiver
from repo_archiver.storage.writer import LogWriteError

console = Console()


def _use_system_locale() -> None:
    """Format table dates (``%x``) in the user's locale."""
    try:
        locale.setlocale(locale.LC_TIME, "")
    except locale.Error as e:
        console.print(
            f"[yellow]Locale unavailable, using default date format:[/yellow] {escape(str(e))}"
        )


def _print_transitions(result: RunResult) -> None:
    table = Table(title="Transitions")
    table.add_column("Repository")
    table.add_column("Last Pushed")
    table.add_column("Action")
    for entry in result.entries:
        table.add_row(entry.repo_name, entry.last_pushed.date().isoformat(), entry.action.value)
    console.print(table)


def _print_summary(result: RunResult, verbose: bool) -> None:
    if not result.has_transitions:
        console.print("No archive/unarchive actions were performed.")
    elif verbose:
        _print_transitions(result)

    console.print("----------------------------------------")
    console.print(f"Total repositories processed: {result.total_processed}")
    console.print(f"Repositories archived: {result.archived_count}")
    console.print(f"Repositories unarchived: {result.unarchived_count}")
    console.print("[bold green]Repository monitoring process completed.[/bold green]")


@click.command()
@click.version_option(version=__version__, prog_name="repo-archiver")
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Log intended archive/unarchive actions without changing any repository",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable verbose output")
@click.option(
    "--stale-months",
    type=click.IntRange(min=0),
    default=None,
    help="Months without a push before a repository is archived (overrides config)",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Optional path to a YAML config file",
)
def main(dry_run: bool, verbose: bool, stale_months: int | None, config_path: Path | None) -> None:
    """Archive inactive GitHub repositories and unarchive revived ones.

    \b
    Credentials come from the environment or a .env file:
        MY_GITHUB_USERNAME, MY_GITHUB_TOKEN   (required)
        STALE_MONTHS                          (default 2)
        DISCORD_WEBHOOK_URL / SLACK_WEBHOOK_URL (optional summary webhook)
    """
    setup_logging(verbose=verbose)
    _use_system_locale()

    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {escape(str(e))}")
        sys.exit(1)

    if dry_run:
        console.print("[yellow]Dry run: no repository will be modified[/yellow]")

    try:
        result = asyncio.run(run_archiver(cfg, dry_run=dry_run, stale_months=stale_months))
    except LogWriteError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Run interrupted by user[/yellow]")
        sys.exit(1)
    except Exception as e:
        console.print(
            "[bold red]An error occurred during repository processing:[/bold red] "
            f"{escape(str(e))}"
        )
        if verbose:
            import traceback

            console.print("\n[dim]Traceback:[/dim]")
            console.print(traceback.format_exc())
        sys.exit(1)

    _print_summary(result, verbose)


if __name__ == "__main__":
    main()
