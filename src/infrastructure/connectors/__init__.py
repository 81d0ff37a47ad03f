"""Service connectors for external music platforms and APIs."""

from src.infrastructure.connectors.spotify import (
    SPOTIFY_SCOPES,
    SpotifyConnector,
    convert_spotify_album,
    convert_spotify_artist,
    convert_spotify_play,
    convert_spotify_playlist,
    convert_spotify_playlist_detail,
    convert_spotify_playlist_item,
    convert_spotify_track,
    create_spotify_client,
)

__all__ = [
    "SPOTIFY_SCOPES",
    "SpotifyConnector",
    "convert_spotify_album",
    "convert_spotify_artist",
    "convert_spotify_play",
    "convert_spotify_playlist",
    "convert_spotify_playlist_detail",
    "convert_spotify_playlist_item",
    "convert_spotify_track",
    "create_spotify_client",
]
