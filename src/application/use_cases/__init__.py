"""Application use cases - orchestrate business operations."""

from .create_throwback import CreateThrowbackCommand, CreateThrowbackUseCase
from .manage_playlists import (
    LinkResult,
    ManagePlaylistsUseCase,
    PlaylistOverview,
    resolve_playlist,
)
from .sync_releases import SyncPlaylistReleasesUseCase, UpdateAllPlaylistsUseCase
from .update_history import UpdateHistoryUseCase

__all__ = [
    "CreateThrowbackCommand",
    "CreateThrowbackUseCase",
    "LinkResult",
    "ManagePlaylistsUseCase",
    "PlaylistOverview",
    "SyncPlaylistReleasesUseCase",
    "UpdateAllPlaylistsUseCase",
    "UpdateHistoryUseCase",
    "resolve_playlist",
]
