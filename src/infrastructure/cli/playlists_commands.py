"""Automated playlist commands: registry management and release sync."""

from typing import Annotated

from rich.console import Console
from rich.markup import escape
import typer

from src.application.services import CurationService
from src.application.use_cases import LinkResult, PlaylistOverview
from src.domain.entities import ConnectorArtist, Playlist, SyncResult
from src.infrastructure.cli.async_helpers import async_service_operation
from src.infrastructure.cli.ui import (
    playlist_list_lines,
    playlist_show_lines,
    render_lines,
    sync_result_lines,
)

console = Console()

app = typer.Typer(help="Manage automated playlists and the artists feeding them")

PlaylistName = Annotated[str, typer.Argument(help="Playlist name")]
ArtistQuery = Annotated[str, typer.Argument(help="Artist to search for")]


@app.command(name="list")
def list_command() -> None:
    """List automated playlists followed by your other playlists."""
    render_lines(playlist_list_lines(_list_playlists()))


@app.command()
def show(name: PlaylistName) -> None:
    """Show an automated playlist with its linked artists."""
    render_lines(playlist_show_lines(_show_playlist(name)))


@app.command()
def create(name: PlaylistName) -> None:
    """Create a new automated playlist."""
    playlist = _create_playlist(name)
    console.print(f"[green]✓[/green] Created automated playlist '{escape(playlist.name)}'")


@app.command()
def automate(name: PlaylistName) -> None:
    """Turn one of your existing playlists into an automated playlist."""
    playlist = _automate_playlist(name)
    console.print(f"[green]✓[/green] '{escape(playlist.name)}' is now automated")


@app.command()
def link(
    playlist: PlaylistName,
    artist: ArtistQuery,
    seed: Annotated[
        int | None,
        typer.Option(
            "--seed", help="Immediately add this many of the artist's top tracks"
        ),
    ] = None,
) -> None:
    """Link an artist to an automated playlist."""
    result = _link_artist(playlist, artist, seed)
    console.print(
        f"[green]✓[/green] Linked {escape(result.artist.name)} "
        f"to '{escape(result.playlist.name)}'"
    )
    if result.seeded_track_ids:
        console.print(f"  Added {len(result.seeded_track_ids)} top tracks")


@app.command()
def unlink(playlist: PlaylistName, artist: ArtistQuery) -> None:
    """Unlink an artist from an automated playlist."""
    unlinked = _unlink_artist(playlist, artist)
    console.print(
        f"[green]✓[/green] Unlinked {escape(unlinked.name)} from '{escape(playlist)}'"
    )


@app.command()
def update() -> None:
    """Add new releases of linked artists to every automated playlist."""
    render_lines(sync_result_lines(_update_playlists()))


@async_service_operation()
async def _list_playlists(*, service: CurationService) -> list[Playlist]:
    return await service.list_playlists()


@async_service_operation()
async def _show_playlist(name: str, *, service: CurationService) -> PlaylistOverview:
    return await service.show_playlist(name)


@async_service_operation()
async def _create_playlist(name: str, *, service: CurationService) -> Playlist:
    return await service.create_playlist(name)


@async_service_operation()
async def _automate_playlist(name: str, *, service: CurationService) -> Playlist:
    return await service.automate_playlist(name)


@async_service_operation()
async def _link_artist(
    playlist: str, artist: str, seed: int | None, *, service: CurationService
) -> LinkResult:
    return await service.link_artist(playlist, artist, seed)


@async_service_operation()
async def _unlink_artist(
    playlist: str, artist: str, *, service: CurationService
) -> ConnectorArtist:
    return await service.unlink_artist(playlist, artist)


@async_service_operation()
async def _update_playlists(*, service: CurationService) -> list[SyncResult]:
    return await service.update_playlists()
