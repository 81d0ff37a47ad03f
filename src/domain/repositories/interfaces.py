"""Domain interfaces for the engine's collaborators.

These protocols define the contracts for persistence, the remote music service
and interactive artist disambiguation without depending on infrastructure
implementations. Concrete adapters are chosen once at startup and injected
into the use cases.
"""

from collections.abc import Awaitable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import datetime

    from src.domain.entities import (
        AlbumType,
        ConnectorAlbum,
        ConnectorArtist,
        ConnectorTrack,
        Listen,
        Playlist,
        PlaylistDetail,
    )


class StoreProtocol(Protocol):
    """Persisted listens, automated playlists and artist links."""

    def append_listen(self, listen: "Listen") -> Awaitable[None]:
        """Persist one listen. Duplicates are allowed."""
        ...

    def latest_listen(self) -> Awaitable["Listen | None"]:
        """Return the listen with the greatest `played_at`, if any."""
        ...

    def all_listens(self) -> Awaitable[list["Listen"]]:
        """Return the full listening history in insertion order."""
        ...

    def create_automated_playlist(self, playlist_id: str, name: str) -> Awaitable[None]:
        """Record a playlist as automated with no linked artists."""
        ...

    def all_automated_playlists(self) -> Awaitable[list["Playlist"]]:
        """Return every automated playlist with its linked artists."""
        ...

    def playlist_by_name(self, name: str) -> Awaitable["Playlist | None"]:
        """Find an automated playlist by exact name."""
        ...

    def link(self, playlist_id: str, artist_id: str) -> Awaitable[None]:
        """Link an artist to a playlist.

        Raises:
            DuplicateLinkError: If the pair is already linked
            NotFoundError: If the playlist is not automated
        """
        ...

    def unlink(self, playlist_id: str, artist_id: str) -> Awaitable[None]:
        """Remove an artist link.

        Raises:
            NotFoundError: If the pair is not linked
        """
        ...


class MusicServiceConnector(Protocol):
    """Remote music service capabilities consumed by the engine.

    Paginated endpoints are returned fully materialized.
    """

    def recent_plays(
        self, limit: int, after: "datetime | None" = None
    ) -> Awaitable[list["Listen"]]:
        """Most recent plays, optionally only those strictly after `after`."""
        ...

    def create_playlist(self, name: str) -> Awaitable["Playlist"]:
        """Create an empty playlist owned by the current user."""
        ...

    def add_tracks(
        self, playlist_id: str, track_ids: list[str], insert_at: int | None = None
    ) -> Awaitable[None]:
        """Add tracks in the given order, appending unless `insert_at` is set."""
        ...

    def list_user_playlists(self) -> Awaitable[list["Playlist"]]:
        """Every playlist of the current user."""
        ...

    def playlist_detail(self, playlist_id: str) -> Awaitable["PlaylistDetail"]:
        """Playlist metadata with every item and its `added_at`."""
        ...

    def artist_detail(self, artist_id: str) -> Awaitable["ConnectorArtist"]:
        """Artist profile with popularity and follower count."""
        ...

    def artist_top_tracks(self, artist_id: str) -> Awaitable[list["ConnectorTrack"]]:
        """The artist's most popular tracks, most popular first."""
        ...

    def artist_albums(
        self, artist_id: str, album_type: "AlbumType"
    ) -> Awaitable[list["ConnectorAlbum"]]:
        """Every release of the given type in the artist's catalog."""
        ...

    def album_tracks(self, album_id: str) -> Awaitable[list["ConnectorTrack"]]:
        """Tracks of an album in album order."""
        ...

    def search_artists(self, query: str) -> Awaitable[list["ConnectorArtist"]]:
        """Up to five artists matching the query, best match first."""
        ...


class ArtistChooserProtocol(Protocol):
    """Interactive boundary used to disambiguate artist search results."""

    def choose_artist(self, candidates: list["ConnectorArtist"]) -> "ConnectorArtist":
        """Present the candidates and return the one the user picked."""
        ...
