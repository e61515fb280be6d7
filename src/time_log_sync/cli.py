"""Command-line interface for time log synchronizer."""

import asyncio
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import httpx
import typer
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from time_log_sync import __version__
from time_log_sync.config import Config
from time_log_sync.errors import ConfigError
from time_log_sync.sync import SyncEngine, SyncPlan
from time_log_sync.timecamp import TimeCampClient, TimeCampEntry
from time_log_sync.timelog import CsvTimeLog, TimeLogEntry
from time_log_sync.utils import get_logger, setup_logging

app = typer.Typer(help="Synchronize a local CSV time log to TimeCamp")
console = Console()
logger = get_logger(__name__)

DATE_FORMAT = "%Y-%m-%d"


def _parse_date(value: str) -> date:
    """Parse a yyyy-MM-dd date or exit with status 1."""
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        console.print("[red]Failed to parse value. Expected format yyyy-MM-dd[/red]")
        raise typer.Exit(code=1)


def _ask_date(value: Optional[str], question: str) -> date:
    """Use the option value or prompt for it."""
    if value is None:
        value = Prompt.ask(question)
    return _parse_date(value)


def _entries_table(title: str, entries: list[TimeCampEntry]) -> Table:
    table = Table(title=title)
    table.add_column("Date", style="cyan")
    table.add_column("Time", style="cyan")
    table.add_column("Service", style="magenta")
    table.add_column("Description")
    for entry in entries:
        table.add_row(
            entry.date.isoformat(),
            f"{entry.start:%H:%M}-{entry.end:%H:%M}",
            entry.name,
            entry.description,
        )
    return table


async def _run_sync(
    config: Config,
    from_dt: date,
    to_dt: date,
    entries: list[TimeLogEntry],
    dry_run: bool,
) -> SyncPlan:
    async with TimeCampClient(config.get_timecamp_token(), base_url=config.base_url) as client:
        engine = SyncEngine(client, mapping=config.get_service_mapping())
        return await engine.sync_entries(from_dt, to_dt, entries, dry_run=dry_run)


async def _run_fetch(config: Config, from_dt: date, to_dt: date) -> list[TimeLogEntry]:
    async with TimeCampClient(config.get_timecamp_token(), base_url=config.base_url) as client:
        engine = SyncEngine(client, mapping=config.get_service_mapping())
        return await engine.fetch_entries(from_dt, to_dt)


@app.command()
def sync(
    from_date: Optional[str] = typer.Option(
        None,
        "--from-date",
        help="Start date for sync (YYYY-MM-DD). Prompted for when omitted.",
    ),
    to_date: Optional[str] = typer.Option(
        None,
        "--to-date",
        help="End date for sync (YYYY-MM-DD). Prompted for when omitted.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would change without touching TimeCamp.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging.",
    ),
    config_dir: Optional[Path] = typer.Option(
        None,
        "--config-dir",
        help="Configuration directory. Defaults to ~/.time-log-sync/",
    ),
) -> None:
    """Make TimeCamp hold exactly the time log entries of a date range."""
    from_dt = _ask_date(from_date, "From?")
    to_dt = _ask_date(to_date, "To?")

    setup_logging(
        log_level=logging.DEBUG if verbose else logging.INFO,
        config_dir=config_dir,
    )
    logger.info(f"Time Log Synchronizer v{__version__}")

    try:
        config = Config(config_dir)
        if config.time_log_path is None:
            raise ConfigError("Time log path not configured. Run: time-log-sync configure")

        time_log = CsvTimeLog(config.time_log_path, client=config.time_log_client)
        entries = time_log.get_entries(from_dt, to_dt)

        plan = asyncio.run(_run_sync(config, from_dt, to_dt, entries, dry_run))
    except httpx.HTTPError as e:
        logger.error(f"API request failed: {e}", exc_info=True)
        console.print(f"[red]Error: API request failed: {e}[/red]")
        raise typer.Exit(code=1)
    except Exception as e:
        logger.error(f"Sync failed: {e}", exc_info=True)
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    if dry_run:
        console.print("[bold cyan]DRY RUN[/bold cyan] - TimeCamp was not changed")
        if plan.additions:
            console.print(_entries_table("To add", plan.additions))
        if plan.removals:
            console.print(_entries_table("To remove", plan.removals))
        if plan.is_empty:
            console.print("[green]TimeCamp is already up to date[/green]")
    else:
        logger.info(f"Sync result: {plan}")

    console.print(f"{len(entries)} entries recorded.")


@app.command()
def entries(
    from_date: Optional[str] = typer.Option(None, "--from-date", help="Start date (YYYY-MM-DD)."),
    to_date: Optional[str] = typer.Option(None, "--to-date", help="End date (YYYY-MM-DD)."),
    config_dir: Optional[Path] = typer.Option(
        None,
        "--config-dir",
        help="Configuration directory. Defaults to ~/.time-log-sync/",
    ),
) -> None:
    """Show TimeCamp entries of a date range as time log entries."""
    from_dt = _ask_date(from_date, "From?")
    to_dt = _ask_date(to_date, "To?")

    setup_logging(config_dir=config_dir)

    try:
        config = Config(config_dir)
        result = asyncio.run(_run_fetch(config, from_dt, to_dt))
    except Exception as e:
        logger.error(f"Fetching entries failed: {e}", exc_info=True)
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    table = Table(title=f"TimeCamp entries {from_dt} - {to_dt}")
    table.add_column("Date", style="cyan")
    table.add_column("Start", style="cyan")
    table.add_column("End", style="cyan")
    table.add_column("Service", style="magenta")
    table.add_column("Description")
    for entry in result:
        table.add_row(
            entry.date.isoformat(),
            f"{entry.start:%H:%M}",
            f"{entry.end:%H:%M}",
            entry.service,
            entry.description,
        )
    console.print(table)


@app.command()
def configure(
    config_dir: Optional[Path] = typer.Option(
        None,
        "--config-dir",
        help="Configuration directory. Defaults to ~/.time-log-sync/",
    ),
) -> None:
    """Configure the TimeCamp token and the time log location."""
    setup_logging(config_dir=config_dir)
    config = Config(config_dir)

    console.print("[bold cyan]Time Log Synchronizer Configuration[/bold cyan]")
    console.print()

    token = Prompt.ask("Enter your TimeCamp API token", password=True)
    config.set_timecamp_token(token)
    console.print("[green]✓ TimeCamp API token saved[/green]")

    current = config.time_log_path
    if current:
        path = Prompt.ask("Path of the CSV time log", default=str(current))
    else:
        path = Prompt.ask("Path of the CSV time log")
    client = Prompt.ask(
        "Client to sync (leave empty to sync every row)",
        default=config.time_log_client or "",
    )
    config.set_time_log(Path(path).expanduser(), client.strip() or None)
    console.print("[green]✓ Time log saved[/green]")

    console.print("[cyan]Testing connection...[/cyan]")
    try:
        user = asyncio.run(_check_connection(token, config.base_url))
        console.print(f"[green]✓ Connected to TimeCamp as user {user}[/green]")
    except Exception as e:
        console.print(f"[red]✗ Failed to connect to TimeCamp: {e}[/red]")

    console.print("\n[green]Configuration complete![/green]")
    console.print("Run 'time-log-sync sync' to start syncing.")


async def _check_connection(token: str, base_url: str) -> str:
    async with TimeCampClient(token, base_url=base_url) as client:
        return (await client.get_current_user()).user_id


@app.command()
def mapping(
    service: Optional[str] = typer.Argument(None, help="Time log service label to map."),
    task: Optional[str] = typer.Argument(None, help="TimeCamp task path, e.g. 'ProjectX - Design'."),
    config_dir: Optional[Path] = typer.Option(
        None,
        "--config-dir",
        help="Configuration directory. Defaults to ~/.time-log-sync/",
    ),
) -> None:
    """View service to task mappings, or add one when SERVICE and TASK are given."""
    setup_logging(config_dir=config_dir)
    config = Config(config_dir)

    if service and not task:
        console.print("[red]A TimeCamp task path is required to map a service[/red]")
        raise typer.Exit(code=1)

    if service and task:
        config.update_service_mapping(service, task)
        console.print(f"[green]✓ Mapped '{service}' to '{task}'[/green]")
        return

    mappings = config.get_service_mappings()
    if not mappings:
        console.print("[yellow]No mappings configured yet.[/yellow]")
        return

    table = Table(title="Service Mappings")
    table.add_column("Time log service", style="cyan")
    table.add_column("TimeCamp task", style="magenta")
    for item in mappings:
        table.add_row(item.get("service", "-"), item.get("task", "-"))
    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"Time Log Synchronizer v{__version__}")


def main() -> None:
    """Main entry point."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        console.print(f"[red]Unexpected error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
