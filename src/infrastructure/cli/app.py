"""Needledrop CLI - Main application entry point and app structure."""

from importlib.metadata import version
from typing import Annotated

from rich.console import Console
import typer

from src.config import get_logger, setup_loguru_logger
from src.infrastructure.cli import history_commands, playlists_commands

VERSION = version("needledrop")

# Initialize console and logger with reasonable width
console = Console(width=80)
logger = get_logger(__name__)

# Initialize main app with modern configuration
app = typer.Typer(
    help=f"🎵 Needledrop v{VERSION} - Playlists that keep up with your listening",
    no_args_is_help=True,  # Show help when no command provided
    rich_markup_mode="rich",
    add_completion=False,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
)

app.add_typer(
    history_commands.app,
    name="history",
    help="Track listening history and build throwback playlists",
    rich_help_panel="🎧 Listening History",
)

app.add_typer(
    playlists_commands.app,
    name="playlists",
    help="Manage automated playlists",
    rich_help_panel="🎵 Automated Playlists",
)


@app.command(name="version", rich_help_panel="⚙️ System")
def version_command() -> None:
    """Show version information."""
    console.print(
        f"[bold bright_blue]🎵 Needledrop[/bold bright_blue] [dim]v{VERSION}[/dim]"
    )


@app.callback()
def init_cli(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output"),
    ] = False,
) -> None:
    """Initialize Needledrop CLI."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    setup_loguru_logger(verbose)


def main() -> int:
    """Application entry point."""
    try:
        return app() or 0
    except Exception:
        logger.exception("Unhandled exception")
        return 1
