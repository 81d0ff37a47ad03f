"""UI helpers for CLI interaction.

This module provides reusable UI components and helpers for the CLI,
keeping the presentation logic separate from business logic.
"""

from collections.abc import Callable
import functools
from typing import ParamSpec, TypeVar

from attrs import define, field
from rich.console import Console
from rich.markup import escape
import typer

from src.application.use_cases import PlaylistOverview
from src.config import get_logger
from src.domain.entities import ConnectorArtist, Playlist, SyncResult
from src.domain.errors import InputError, NeedledropError

# Initialize console and logger
console = Console()
logger = get_logger(__name__)

# Type variables for command handler decorator
P = ParamSpec("P")
R = TypeVar("R")


def command_error_handler(func: Callable[P, R]) -> Callable[P, R]:
    """Decorator to standardize error handling for CLI commands.

    This decorator wraps a command function to:
    1. Provide consistent error handling using Typer's Exit mechanism
    2. Log errors using Loguru with proper context
    3. Display user-friendly error messages with Rich

    Args:
        func: The command function to wrap

    Returns:
        Wrapped function with integrated error handling
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        operation = func.__name__.strip("_").replace("_", " ")

        with logger.contextualize(operation=operation):
            try:
                logger.debug(f"Executing {operation}")
                return func(*args, **kwargs)

            except typer.Exit:
                raise

            except typer.Abort:
                logger.info(f"Operation {operation} aborted by user")
                raise

            except Exception as e:
                if isinstance(e, NeedledropError):
                    logger.debug(f"Error during {operation}: {e}")
                else:
                    logger.exception(f"Error during {operation}")

                # Display a clean error message to the user
                console.print(
                    f"[bold red]✗ Error during {operation}:[/bold red] {escape(str(e))}",
                    highlight=False,
                    soft_wrap=True,
                )

                raise typer.Exit(code=1) from e

    return wrapper


def print_line(line: str) -> None:
    """Print user data verbatim, tabs included."""
    typer.echo(line)


def playlist_list_lines(playlists: list[Playlist]) -> list[str]:
    return [
        f"{playlist.name} [automated, number of artists: {len(playlist.artists)}]"
        if playlist.automated
        else playlist.name
        for playlist in playlists
    ]


def playlist_show_lines(overview: PlaylistOverview) -> list[str]:
    """Artist stats followed by the playlist's remote metadata."""
    detail = overview.detail
    lines = ["Artists:"]
    lines.extend(
        f"\t{artist.name} (popularity: {artist.popularity}, "
        f"followers: {artist.follower_count})"
        for artist in overview.artists
    )
    lines.extend([
        f"Description: {detail.description or ''}",
        f"Number of tracks: {detail.track_count}",
        f"Number of followers: {detail.follower_count}",
        f"Is collaborative: {detail.collaborative}",
        f"Is public: {detail.public}",
    ])
    return lines


def sync_result_lines(results: list[SyncResult]) -> list[str]:
    return [
        f"{result.playlist_name}: {result.tracks_added} tracks added"
        for result in results
    ]


def render_lines(lines: list[str]) -> None:
    for line in lines:
        print_line(line)


def parse_choice(text: str, count: int) -> int:
    """Turn a 1-based menu answer into a 0-based index.

    Raises:
        InputError: If the answer is not a number between 1 and `count`
    """
    try:
        choice = int(text.strip())
    except ValueError as e:
        raise InputError(f"Not a number: {text.strip()!r}") from e
    if not 1 <= choice <= count:
        raise InputError(f"Choice {choice} is not between 1 and {count}")
    return choice - 1


@define(slots=True)
class ConsoleArtistChooser:
    """Line-oriented artist picker.

    Lists the candidates numbered from 1 and reads answers until one is valid.
    """

    read_line: Callable[[], str] = field(default=input)
    write_line: Callable[[str], None] = field(default=print_line)

    def choose_artist(self, candidates: list[ConnectorArtist]) -> ConnectorArtist:
        self.write_line("choose one of the following artists:")
        for number, artist in enumerate(candidates, start=1):
            self.write_line(
                f"[{number}] {artist.name} (followers: {artist.follower_count})"
            )

        while True:
            try:
                return candidates[parse_choice(self.read_line(), len(candidates))]
            except InputError as e:
                logger.debug(f"Rejected artist choice: {e}")
                self.write_line("Wrong choice. Try again")
