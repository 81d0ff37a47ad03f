"""Core domain entities representing music concepts."""

from .catalog import (
    AlbumType,
    ConnectorAlbum,
    ConnectorArtist,
    ConnectorTrack,
    ReleaseDatePrecision,
)
from .listen import Listen, PeriodUnit, ThrowbackEntry, ThrowbackPeriod
from .operations import HistoryUpdateResult, SyncResult, ThrowbackResult
from .playlist import Playlist, PlaylistDetail, PlaylistItem
from .shared import ensure_utc, start_of_day

__all__ = [
    # Catalog entities
    "AlbumType",
    "ConnectorAlbum",
    "ConnectorArtist",
    "ConnectorTrack",
    "ReleaseDatePrecision",
    # Listening history
    "Listen",
    "PeriodUnit",
    "ThrowbackEntry",
    "ThrowbackPeriod",
    # Playlists
    "Playlist",
    "PlaylistDetail",
    "PlaylistItem",
    # Operation results
    "HistoryUpdateResult",
    "SyncResult",
    "ThrowbackResult",
    # Shared utilities
    "ensure_utc",
    "start_of_day",
]
