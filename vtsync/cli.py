"""CLI for the vtsync channel and video sync engine."""

import asyncio

import typer
from pydantic import BaseModel
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table

from vtsync.core.config import Settings, get_settings_with_yaml
from vtsync.core.http_session import close_all_sessions
from vtsync.core.logging_config import setup_logging
from vtsync.core.schemas import (
    PersistReport,
    ScrapeSummary,
    UpdateSummary,
    ValidationReport,
)
from vtsync.database import MongoDBManager
from vtsync.sync import ACTION_STAGES, Action, Orchestrator, PlatformRegistry, Stage
from vtsync.youtube import YouTubeClient, register_youtube

app = typer.Typer(help="vtsync - track channels and keep livestream statuses in sync")
console = Console()

MENU: list[tuple[str, Action | None]] = [
    ("Initialize (Run Everything)", Action.INIT),
    ("Validate JSON Files", Action.VALIDATE),
    ("Save + Update", Action.SAVE_UPDATE),
    ("Save Channels", Action.SAVE),
    ("Update Channels", Action.UPDATE),
    ("Scrape Channels", Action.SCRAPE),
    ("Drop Members and Channels Collection", Action.DROP_COLLECTIONS),
    ("Drop Database", Action.DROP_DATABASE),
    ("Exit", None),
]


def build_registry(store: MongoDBManager, settings: Settings) -> PlatformRegistry:
    """Register every implemented platform pipeline."""
    registry = PlatformRegistry()
    register_youtube(registry, store, YouTubeClient.from_settings(settings), settings)
    return registry


STORE_FREE_STAGES = frozenset({Stage.VALIDATE})


async def _run_action(action: Action, settings: Settings) -> dict[Stage, BaseModel | None]:
    stages = set(ACTION_STAGES[action])
    if stages <= STORE_FREE_STAGES:
        # MongoDBManager connects lazily, so nothing here opens a connection
        return await Orchestrator(MongoDBManager(settings), PlatformRegistry(), settings=settings).run(action)

    needs_api = bool({Stage.UPDATE, Stage.SCRAPE} & stages)
    async with MongoDBManager(settings) as db:
        await db.init_indexes()
        registry = build_registry(db, settings) if needs_api else PlatformRegistry()
        orchestrator = Orchestrator(db, registry, settings=settings)
        try:
            return await orchestrator.run(action)
        finally:
            close_all_sessions()


def _display_results(results: dict[Stage, BaseModel | None]) -> None:
    """Display a summary table for each stage that ran."""
    table = Table(show_header=True, box=None)
    table.add_column("Stage", style="cyan", width=18)
    table.add_column("Result", style="white")

    for stage, result in results.items():
        if isinstance(result, ValidationReport):
            status = "[green]OK[/green]" if result.ok else "[red]FAILED[/red]"
            detail = result.error or f"{result.total} channels, {len(result.failures)} invalid"
            table.add_row(stage.value, f"{status} {escape(detail)}")
        elif isinstance(result, PersistReport):
            table.add_row(
                stage.value,
                f"{result.channels_saved} channels saved, "
                f"{len(result.failed_files)} files failed",
            )
        elif isinstance(result, UpdateSummary):
            failed = ", ".join(result.failed_platforms) or "none"
            table.add_row(
                stage.value,
                f"{result.updated} updated, {result.missing} missing, failed platforms: {failed}",
            )
        elif isinstance(result, ScrapeSummary):
            table.add_row(
                stage.value,
                f"OK={len(result.ok)} FAIL={len(result.fail)} videoCount={result.video_count}",
            )
        else:
            table.add_row(stage.value, "done")

    console.print(table)


def _execute(action: Action, config: str | None, verbose: bool) -> None:
    settings = get_settings_with_yaml(config)
    setup_logging("DEBUG" if verbose else settings.log_level, settings.log_file)
    try:
        results = asyncio.run(_run_action(action, settings))
    except Exception as e:
        rprint(f"[red]✗ Error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    _display_results(results)
    validation = results.get(Stage.VALIDATE)
    if isinstance(validation, ValidationReport) and not validation.ok:
        raise typer.Exit(1)


ConfigOption = typer.Option(None, "--config", "-c", help="Path to config.yaml")
VerboseOption = typer.Option(False, "-v", "--verbose", help="Show debug output")


@app.command()
def init(config: str | None = ConfigOption, verbose: bool = VerboseOption):
    """Validate, save channels, update videos, then scrape new channels."""
    _execute(Action.INIT, config, verbose)


@app.command()
def validate(config: str | None = ConfigOption, verbose: bool = VerboseOption):
    """Validate channel definition files."""
    _execute(Action.VALIDATE, config, verbose)


@app.command()
def save(config: str | None = ConfigOption, verbose: bool = VerboseOption):
    """Save channel definitions to the database."""
    _execute(Action.SAVE, config, verbose)


@app.command("save-update")
def save_update(config: str | None = ConfigOption, verbose: bool = VerboseOption):
    """Save channel definitions, then update videos."""
    _execute(Action.SAVE_UPDATE, config, verbose)


@app.command()
def update(config: str | None = ConfigOption, verbose: bool = VerboseOption):
    """Refresh the status of stale videos."""
    _execute(Action.UPDATE, config, verbose)


@app.command()
def scrape(config: str | None = ConfigOption, verbose: bool = VerboseOption):
    """Discover historical videos for channels never crawled."""
    _execute(Action.SCRAPE, config, verbose)


@app.command("drop-collections")
def drop_collections(
    config: str | None = ConfigOption,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Drop the channels collection and reset member numbering."""
    if not yes:
        typer.confirm("Drop channels collection?", abort=True)
    _execute(Action.DROP_COLLECTIONS, config, False)


@app.command("drop-database")
def drop_database(
    config: str | None = ConfigOption,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Drop the whole database."""
    if not yes:
        typer.confirm("Drop the whole database?", abort=True)
    _execute(Action.DROP_DATABASE, config, False)


@app.command()
def menu(config: str | None = ConfigOption):
    """Interactive channel manager."""
    rprint(
        "[bold blue]----------------------   Manage Channels   ----------------------[/bold blue]\n"
        " Make sure you've set up the .json files in the channels directory.\n"
        "-----------------------------------------------------------------"
    )
    for number, (label, _) in enumerate(MENU, 1):
        rprint(f" [{number}] {label}")

    choices = [str(n) for n in range(1, len(MENU) + 1)]
    selection = Prompt.ask("Selection", choices=choices, show_choices=False)
    action = MENU[int(selection) - 1][1]
    if action is None:
        raise typer.Exit()
    _execute(action, config, False)


if __name__ == "__main__":
    app()
