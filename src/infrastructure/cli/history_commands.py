"""Listening history commands: ingestion and throwback playlists."""

from typing import Annotated

from rich.console import Console
from rich.markup import escape
import typer

from src.application.services import CurationService
from src.domain.entities import HistoryUpdateResult, ThrowbackPeriod, ThrowbackResult
from src.infrastructure.cli.async_helpers import async_service_operation

console = Console()

app = typer.Typer(help="Track listening history and build throwback playlists")


@app.command()
def update() -> None:
    """Fetch recently played tracks and append them to the history."""
    result = _update_history()
    console.print(f"[green]✓[/green] Added {result.listens_added} listens to history")


@app.command()
def throwback(
    name: Annotated[
        str | None,
        typer.Option("--name", "-n", help="Playlist name (default: Throwback - <date>)"),
    ] = None,
    period: Annotated[
        str | None,
        typer.Option(
            "--period",
            "-p",
            help="Skip songs played within this window, e.g. 5d, 3w, 6m, 1y (default: 25w)",
        ),
    ] = None,
    size: Annotated[
        int | None,
        typer.Option("--size", "-s", help="Maximum number of tracks (default: 50)"),
    ] = None,
) -> None:
    """Create a playlist of your most played songs you haven't heard lately."""
    result = _create_throwback(name=name, period=period, size=size)
    if not result.created:
        console.print("[yellow]No songs eligible for a throwback, nothing created[/yellow]")
        return
    console.print(
        f"[green]✓[/green] Created '{escape(result.playlist_name)}' "
        f"with {len(result.song_ids)} tracks",
        highlight=False,
    )


@async_service_operation()
async def _update_history(*, service: CurationService) -> HistoryUpdateResult:
    return await service.update_history()


@async_service_operation()
async def _create_throwback(
    name: str | None,
    period: str | None,
    size: int | None,
    *,
    service: CurationService,
) -> ThrowbackResult:
    parsed_period = ThrowbackPeriod.parse(period) if period is not None else None
    return await service.create_throwback(name=name, period=parsed_period, size=size)
