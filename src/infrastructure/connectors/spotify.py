"""Spotify service connector with domain model conversion.

This module provides a connector for the Spotify API using the spotipy library
(https://spotipy.readthedocs.io/) to handle authentication and conversion
between Spotify objects and domain models.

Key components:
- SpotifyConnector: OAuth-authenticated client implementing MusicServiceConnector
- Conversion utilities: Transform Spotify API responses to domain models

All identifiers exchanged with the engine are Spotify URIs
(spotify:track:..., spotify:artist:..., spotify:playlist:...). Paginated
endpoints are read to the end before returning.
"""

import asyncio
from collections.abc import Callable
from datetime import UTC, date, datetime
from typing import Any

from attrs import define, field
import requests
import spotipy
from spotipy.oauth2 import SpotifyOAuth, SpotifyOauthError

from src.config import get_config, get_logger, resilient_operation, settings
from src.domain.entities import (
    AlbumType,
    ConnectorAlbum,
    ConnectorArtist,
    ConnectorTrack,
    Listen,
    Playlist,
    PlaylistDetail,
    PlaylistItem,
    ReleaseDatePrecision,
)
from src.domain.errors import ServiceError

# Get contextual logger with service binding
logger = get_logger(__name__).bind(service="spotify")

SPOTIFY_SCOPES = [
    "user-read-recently-played",
    "playlist-modify-public",
    "playlist-modify-private",
    "playlist-read-private",
    "playlist-read-collaborative",
]


def create_spotify_client() -> spotipy.Spotify:
    """Build an OAuth-authenticated spotipy client from settings."""
    credentials = settings.credentials
    return spotipy.Spotify(
        auth_manager=SpotifyOAuth(
            client_id=credentials.spotify_client_id or None,
            client_secret=credentials.spotify_client_secret or None,
            redirect_uri=credentials.spotify_redirect_uri or None,
            scope=SPOTIFY_SCOPES,
            open_browser=True,
            cache_handler=spotipy.CacheFileHandler(
                cache_path=str(credentials.spotify_token_cache)
            ),
        ),
        requests_timeout=settings.api.spotify_request_timeout,
        retries=settings.api.spotify_retry_count,
        status_retries=settings.api.spotify_retry_count,
    )


@define(slots=True)
class SpotifyConnector:
    """Thin wrapper around spotipy with domain model conversion.

    Handles OAuth flow and provides methods to:
    - Read recently played tracks
    - Create playlists and add tracks to them
    - Read playlists, artists, albums and search results

    Blocking spotipy calls run in a worker thread one at a time. Spotify and
    transport failures surface as ServiceError.
    """

    client: spotipy.Spotify = field(default=None, repr=False)

    def __attrs_post_init__(self) -> None:
        if self.client is None:
            logger.debug("Initializing Spotify connector")
            self.client = create_spotify_client()

    async def _call(self, method: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        try:
            return await asyncio.to_thread(method, *args, **kwargs)
        except (
            spotipy.SpotifyException,
            SpotifyOauthError,
            requests.RequestException,
        ) as e:
            raise ServiceError(f"Spotify request failed: {e}") from e

    async def _drain(self, page: dict[str, Any] | None) -> list[dict[str, Any]]:
        """Collect the items of a paging object and every page after it."""
        items: list[dict[str, Any]] = []
        while page:
            items.extend(page.get("items") or [])
            if not page.get("next"):
                break
            page = await self._call(self.client.next, page)
        return items

    @resilient_operation("spotify_recent_plays")
    async def recent_plays(
        self, limit: int, after: datetime | None = None
    ) -> list[Listen]:
        """Fetch one page of recent plays, strictly after `after` when given."""
        after_ms = int(after.timestamp() * 1000) if after is not None else None
        response = await self._call(
            self.client.current_user_recently_played, limit=limit, after=after_ms
        )
        items = (response or {}).get("items") or []
        listens = [convert_spotify_play(item) for item in items if item.get("track")]
        logger.debug(f"Fetched {len(listens)} recent plays", after=after_ms)
        return listens

    @resilient_operation("spotify_create_playlist")
    async def create_playlist(self, name: str) -> Playlist:
        me = await self._call(self.client.current_user)
        raw_playlist = await self._call(
            self.client.user_playlist_create, user=me["id"], name=name, public=False
        )
        if not raw_playlist:
            raise ServiceError(f"Spotify returned no playlist when creating '{name}'")
        logger.info(f"Created Spotify playlist: {name}")
        return convert_spotify_playlist(raw_playlist)

    @resilient_operation("spotify_add_tracks")
    async def add_tracks(
        self, playlist_id: str, track_ids: list[str], insert_at: int | None = None
    ) -> None:
        """Add tracks in order, in batches the API accepts.

        With `insert_at`, each batch goes right after the previous one so the
        final order matches `track_ids`.
        """
        batch_size = get_config("SPOTIFY_API_ADD_BATCH_SIZE", 100)
        for offset in range(0, len(track_ids), batch_size):
            batch = track_ids[offset : offset + batch_size]
            position = insert_at + offset if insert_at is not None else None
            await self._call(
                self.client.playlist_add_items,
                playlist_id,
                batch,
                position=position,
            )
        logger.info(
            f"Added {len(track_ids)} tracks to playlist",
            playlist_id=playlist_id,
            insert_at=insert_at,
        )

    @resilient_operation("spotify_list_user_playlists")
    async def list_user_playlists(self) -> list[Playlist]:
        first_page = await self._call(
            self.client.current_user_playlists,
            limit=get_config("SPOTIFY_API_PAGE_SIZE", 50),
        )
        items = await self._drain(first_page)
        return [convert_spotify_playlist(item) for item in items if item]

    @resilient_operation("spotify_playlist_detail")
    async def playlist_detail(self, playlist_id: str) -> PlaylistDetail:
        raw_playlist = await self._call(self.client.playlist, playlist_id)
        if not isinstance(raw_playlist, dict):
            raise ServiceError(f"Invalid playlist response for {playlist_id}")

        raw_items = await self._drain(raw_playlist.get("tracks"))
        items = [
            convert_spotify_playlist_item(item)
            for item in raw_items
            if item and item.get("track")
        ]
        return convert_spotify_playlist_detail(raw_playlist, items)

    @resilient_operation("spotify_artist_detail")
    async def artist_detail(self, artist_id: str) -> ConnectorArtist:
        return convert_spotify_artist(await self._call(self.client.artist, artist_id))

    @resilient_operation("spotify_artist_top_tracks")
    async def artist_top_tracks(self, artist_id: str) -> list[ConnectorTrack]:
        response = await self._call(
            self.client.artist_top_tracks,
            artist_id,
            country=settings.api.spotify_market,
        )
        return [
            convert_spotify_track(track) for track in (response or {}).get("tracks", [])
        ]

    @resilient_operation("spotify_artist_albums")
    async def artist_albums(
        self, artist_id: str, album_type: AlbumType
    ) -> list[ConnectorAlbum]:
        first_page = await self._call(
            self.client.artist_albums,
            artist_id,
            include_groups=AlbumType(album_type).value,
            limit=get_config("SPOTIFY_API_PAGE_SIZE", 50),
        )
        items = await self._drain(first_page)
        return [convert_spotify_album(item) for item in items if item]

    @resilient_operation("spotify_album_tracks")
    async def album_tracks(self, album_id: str) -> list[ConnectorTrack]:
        first_page = await self._call(
            self.client.album_tracks,
            album_id,
            limit=get_config("SPOTIFY_API_PAGE_SIZE", 50),
        )
        items = await self._drain(first_page)
        return [convert_spotify_track(item) for item in items if item]

    @resilient_operation("spotify_search_artists")
    async def search_artists(self, query: str) -> list[ConnectorArtist]:
        response = await self._call(
            self.client.search,
            q=query,
            type="artist",
            limit=get_config("SPOTIFY_API_SEARCH_LIMIT", 5),
        )
        items = ((response or {}).get("artists") or {}).get("items") or []
        return [convert_spotify_artist(item) for item in items if item]


def parse_spotify_timestamp(value: str | None) -> datetime | None:
    """Parse Spotify's ISO 8601 timestamps ("2023-09-21T15:48:56Z")."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def parse_release_date(value: str | None, precision: str) -> date | None:
    """Parse a release date of any precision, anchoring partial dates to day one."""
    if not value:
        return None
    try:
        if precision == ReleaseDatePrecision.YEAR:
            return datetime.strptime(value, "%Y").date()
        if precision == ReleaseDatePrecision.MONTH:
            return datetime.strptime(value, "%Y-%m").date()
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        logger.warning(f"Failed to parse release date '{value}': {e}")
        return None


def convert_spotify_artist(spotify_artist: dict[str, Any]) -> ConnectorArtist:
    """Convert full or simplified Spotify artist data to ConnectorArtist."""
    return ConnectorArtist(
        id=spotify_artist["uri"],
        name=spotify_artist.get("name", ""),
        popularity=spotify_artist.get("popularity") or 0,
        follower_count=(spotify_artist.get("followers") or {}).get("total") or 0,
    )


def convert_spotify_track(spotify_track: dict[str, Any]) -> ConnectorTrack:
    """Convert Spotify track data to ConnectorTrack.

    Artists without a URI (local files) are dropped.
    """
    return ConnectorTrack(
        id=spotify_track.get("uri") or "",
        name=spotify_track.get("name", ""),
        artists=[
            convert_spotify_artist(artist)
            for artist in spotify_track.get("artists", [])
            if artist.get("uri")
        ],
    )


def convert_spotify_album(spotify_album: dict[str, Any]) -> ConnectorAlbum:
    precision = spotify_album.get("release_date_precision") or "day"
    return ConnectorAlbum(
        id=spotify_album["uri"],
        name=spotify_album.get("name", ""),
        release_date=parse_release_date(spotify_album.get("release_date"), precision),
        precision=precision,
        album_type=spotify_album.get("album_group")
        or spotify_album.get("album_type")
        or AlbumType.ALBUM,
    )


def convert_spotify_play(spotify_item: dict[str, Any]) -> Listen:
    """Convert a recently-played item ({track, played_at}) to a Listen."""
    return Listen(
        song_id=spotify_item["track"]["uri"],
        played_at=parse_spotify_timestamp(spotify_item["played_at"]),
    )


def convert_spotify_playlist(spotify_playlist: dict[str, Any]) -> Playlist:
    """Convert Spotify playlist data to a plain (non-automated) Playlist."""
    return Playlist(id=spotify_playlist["uri"], name=spotify_playlist.get("name", ""))


def convert_spotify_playlist_item(spotify_item: dict[str, Any]) -> PlaylistItem:
    return PlaylistItem(
        track=convert_spotify_track(spotify_item["track"]),
        added_at=parse_spotify_timestamp(spotify_item.get("added_at")),
    )


def convert_spotify_playlist_detail(
    spotify_playlist: dict[str, Any], items: list[PlaylistItem]
) -> PlaylistDetail:
    """Convert full Spotify playlist data and its drained items to PlaylistDetail.

    Args:
        spotify_playlist: Raw playlist data from Spotify API
        items: Every playlist item, already converted

    Returns:
        PlaylistDetail with metadata and items
    """
    return PlaylistDetail(
        id=spotify_playlist["uri"],
        name=spotify_playlist.get("name", ""),
        description=spotify_playlist.get("description") or None,
        follower_count=(spotify_playlist.get("followers") or {}).get("total") or 0,
        track_count=(spotify_playlist.get("tracks") or {}).get("total", len(items)),
        collaborative=bool(spotify_playlist.get("collaborative")),
        public=bool(spotify_playlist.get("public")),
        items=items,
    )
