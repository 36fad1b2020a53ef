"""CLI entry point for StarPulse.

Provides commands:
  - tui: Launch the interactive terminal interface
  - search: One-shot fame index lookup for a name
  - history: List or clear the persisted recent results
  - config: Manage the Gemini API key
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from starpulse.config import get_api_key, load_settings, set_api_key
from starpulse.models import rank_title

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="StarPulse - Global fame index lookup for singers and actors",
    rich_markup_mode="rich",
)
console = Console()

history_app = typer.Typer(help="Inspect or clear recent search results")
app.add_typer(history_app, name="history")

config_app = typer.Typer(help="Manage configuration (API keys)")
app.add_typer(config_app, name="config")

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to JSON settings file"),
]
DbOption = Annotated[
    Path | None,
    typer.Option("--db", "-d", help="Path to history database"),
]


def _open_history(config_path: Path | None, db_path: Path | None):
    from starpulse.services import HistoryStore, SqliteBlobStore

    settings = load_settings(config_path)
    store = SqliteBlobStore(db_path or settings.db_path)
    return settings, store, HistoryStore(
        store, key=settings.history_key, limit=settings.history_limit
    )


@app.command()
def tui(config: ConfigOption = None, db: DbOption = None) -> None:
    """Launch the interactive terminal interface."""
    from starpulse.tui import run_tui

    run_tui(config_path=config, db_path=db)


@app.command()
def search(
    name: Annotated[str, typer.Argument(help="Name of the singer or actor")],
    config: ConfigOption = None,
    db: DbOption = None,
    save: Annotated[
        bool, typer.Option("--save/--no-save", help="Record the result in history")
    ] = True,
) -> None:
    """Fetch the fame index profile for NAME."""
    from starpulse.services import ProfileError, ProfileService, upsert_history

    name = name.strip()
    if not name:
        console.print("[red]Name must not be blank.[/red]")
        raise typer.Exit(code=1)

    try:
        api_key = get_api_key()
    except RuntimeError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    settings, store, history_store = _open_history(config, db)
    with store:
        service = ProfileService(
            api_key=api_key,
            profile_model=settings.profile_model,
            suggest_model=settings.suggest_model,
            max_suggestions=settings.max_suggestions,
        )
        with console.status(f"Analysing {name}..."):
            try:
                record = asyncio.run(service.fetch_profile(name))
            except ProfileError as e:
                console.print(f"[red]Search failed:[/red] {e}")
                raise typer.Exit(code=1)

        body = (
            f"[bold orange1]{record.popularity_rating:.1f}[/bold orange1]  "
            f"[bold]{rank_title(record.popularity_rating)}[/bold]\n\n"
            f"{record.rating_justification}\n\n"
            f"[dim]{record.basic_info.nationality} · {record.basic_info.age} · "
            f"{record.basic_info.gender}[/dim]"
        )
        console.print(Panel(body, title=record.name, border_style="orange1"))

        if save:
            history = upsert_history(history_store.load(), record, history_store.limit)
            if not history_store.save(history):
                console.print("[yellow]Warning: could not save history.[/yellow]")


@history_app.command("list")
def history_list(config: ConfigOption = None, db: DbOption = None) -> None:
    """Show the persisted recent results, newest first."""
    _settings, store, history_store = _open_history(config, db)
    with store:
        history = history_store.load()

    if not history:
        console.print("[dim]No searches yet.[/dim]")
        return

    table = Table(title="Recent Searches")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Index", justify="right")
    table.add_column("Rank")
    for i, record in enumerate(history, start=1):
        table.add_row(
            str(i),
            record.name,
            f"{record.popularity_rating:.1f}",
            rank_title(record.popularity_rating),
        )
    console.print(table)


@history_app.command("clear")
def history_clear(
    config: ConfigOption = None,
    db: DbOption = None,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Delete all persisted recent results."""
    if not yes and not typer.confirm("Clear search history?"):
        raise typer.Abort()
    _settings, store, history_store = _open_history(config, db)
    with store:
        if not history_store.clear():
            console.print("[red]Failed to clear history.[/red]")
            raise typer.Exit(code=1)
    console.print("[green]History cleared.[/green]")


@config_app.command("set-api-key")
def config_set_api_key(
    key: Annotated[str, typer.Argument(help="Gemini API key")],
) -> None:
    """Store the Gemini API key in the system keyring."""
    set_api_key(key)
    console.print("[green]API key saved to system keyring.[/green]")


@config_app.command("show")
def config_show(config: ConfigOption = None) -> None:
    """Show effective settings."""
    settings = load_settings(config)
    table = Table(title="Settings")
    table.add_column("Key")
    table.add_column("Value")
    for key, value in vars(settings).items():
        table.add_row(key, str(value))
    try:
        get_api_key()
        table.add_row("api_key", "[green]configured[/green]")
    except RuntimeError:
        table.add_row("api_key", "[red]missing[/red]")
    console.print(table)


if __name__ == "__main__":
    app()
