"""In-memory doubles for the store, the music service and the artist chooser."""

from datetime import datetime

from src.domain.entities import (
    AlbumType,
    ConnectorAlbum,
    ConnectorArtist,
    ConnectorTrack,
    Listen,
    Playlist,
    PlaylistDetail,
    PlaylistItem,
)
from src.domain.errors import DuplicateLinkError, NotFoundError, ServiceError


class InMemoryStore:
    """StoreProtocol backed by plain lists, preserving insertion order."""

    def __init__(self, listens: list[Listen] | None = None) -> None:
        self.listens: list[Listen] = list(listens or [])
        self.playlists: list[tuple[str, str]] = []
        self.links: list[tuple[str, str]] = []

    async def append_listen(self, listen: Listen) -> None:
        self.listens.append(listen)

    async def latest_listen(self) -> Listen | None:
        latest = None
        for listen in self.listens:
            if latest is None or listen.played_at >= latest.played_at:
                latest = listen
        return latest

    async def all_listens(self) -> list[Listen]:
        return list(self.listens)

    async def create_automated_playlist(self, playlist_id: str, name: str) -> None:
        self.playlists.append((playlist_id, name))

    def _playlist(self, playlist_id: str, name: str) -> Playlist:
        artists = [a for p, a in self.links if p == playlist_id]
        return Playlist(id=playlist_id, name=name, artists=artists, automated=True)

    async def all_automated_playlists(self) -> list[Playlist]:
        return [self._playlist(pid, name) for pid, name in self.playlists]

    async def playlist_by_name(self, name: str) -> Playlist | None:
        for pid, playlist_name in self.playlists:
            if playlist_name == name:
                return self._playlist(pid, playlist_name)
        return None

    async def link(self, playlist_id: str, artist_id: str) -> None:
        if not any(pid == playlist_id for pid, _ in self.playlists):
            raise NotFoundError(f"Playlist {playlist_id} is not automated")
        if (playlist_id, artist_id) in self.links:
            raise DuplicateLinkError(playlist_id, artist_id)
        self.links.append((playlist_id, artist_id))

    async def unlink(self, playlist_id: str, artist_id: str) -> None:
        if (playlist_id, artist_id) not in self.links:
            raise NotFoundError(f"Artist {artist_id} is not linked to {playlist_id}")
        self.links.remove((playlist_id, artist_id))


class FakeMusicService:
    """MusicServiceConnector double with a scriptable catalog.

    Playlists created or filled through it are tracked so release sync can be
    run repeatedly against its own additions. Every call is recorded in
    `calls` as `(method, args)`.
    """

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now
        self.recent: list[Listen] = []
        self.user_playlists: list[Playlist] = []
        self.playlist_items: dict[str, list[PlaylistItem]] = {}
        self.details: dict[str, PlaylistDetail] = {}
        self.artists: dict[str, ConnectorArtist] = {}
        self.top_tracks: dict[str, list[ConnectorTrack]] = {}
        self.albums: dict[tuple[str, AlbumType], list[ConnectorAlbum]] = {}
        self.tracks_by_album: dict[str, list[ConnectorTrack]] = {}
        self.search_results: dict[str, list[ConnectorArtist]] = {}
        self.added: list[tuple[str, list[str], int | None]] = []
        self.calls: list[tuple[str, tuple]] = []
        self.fail_on: set[str] = set()
        self._created = 0

    def _record(self, method: str, *args) -> None:
        self.calls.append((method, args))
        if method in self.fail_on:
            raise ServiceError(f"{method} failed")

    def calls_to(self, method: str) -> list[tuple]:
        return [args for name, args in self.calls if name == method]

    # Scripting helpers

    def add_artist(
        self,
        artist_id: str,
        name: str,
        top_track_count: int = 0,
        popularity: int = 50,
        follower_count: int = 1000,
    ) -> ConnectorArtist:
        artist = ConnectorArtist(
            id=artist_id,
            name=name,
            popularity=popularity,
            follower_count=follower_count,
        )
        self.artists[artist_id] = artist
        self.top_tracks[artist_id] = [
            ConnectorTrack(id=f"{artist_id}:top:{i}", name=f"Top {i}", artists=[artist])
            for i in range(top_track_count)
        ]
        return artist

    def add_album(
        self,
        artist_id: str,
        album_id: str,
        release_date,
        track_count: int = 2,
        album_type: AlbumType = AlbumType.ALBUM,
        precision: str = "day",
    ) -> ConnectorAlbum:
        album = ConnectorAlbum(
            id=album_id,
            name=album_id,
            release_date=release_date,
            precision=precision,
            album_type=album_type,
        )
        self.albums.setdefault((artist_id, album_type), []).append(album)
        artist = self.artists[artist_id]
        self.tracks_by_album[album_id] = [
            ConnectorTrack(id=f"{album_id}:{i}", name=f"Track {i}", artists=[artist])
            for i in range(track_count)
        ]
        return album

    def _track(self, track_id: str) -> ConnectorTrack:
        for tracks in [*self.top_tracks.values(), *self.tracks_by_album.values()]:
            for track in tracks:
                if track.id == track_id:
                    return track
        return ConnectorTrack(id=track_id)

    # MusicServiceConnector

    async def recent_plays(self, limit: int, after: datetime | None = None) -> list[Listen]:
        self._record("recent_plays", limit, after)
        plays = [p for p in self.recent if after is None or p.played_at > after]
        return plays[:limit]

    async def create_playlist(self, name: str) -> Playlist:
        self._record("create_playlist", name)
        self._created += 1
        playlist = Playlist(id=f"spotify:playlist:new{self._created}", name=name)
        self.user_playlists.append(playlist)
        self.playlist_items[playlist.id] = []
        return playlist

    async def add_tracks(
        self, playlist_id: str, track_ids: list[str], insert_at: int | None = None
    ) -> None:
        self._record("add_tracks", playlist_id, list(track_ids), insert_at)
        self.added.append((playlist_id, list(track_ids), insert_at))
        items = [
            PlaylistItem(track=self._track(track_id), added_at=self.now)
            for track_id in track_ids
        ]
        current = self.playlist_items.setdefault(playlist_id, [])
        position = len(current) if insert_at is None else insert_at
        current[position:position] = items

    async def list_user_playlists(self) -> list[Playlist]:
        self._record("list_user_playlists")
        return list(self.user_playlists)

    async def playlist_detail(self, playlist_id: str) -> PlaylistDetail:
        self._record("playlist_detail", playlist_id)
        if playlist_id in self.details:
            return self.details[playlist_id]
        items = self.playlist_items.get(playlist_id, [])
        return PlaylistDetail(
            id=playlist_id,
            name=playlist_id,
            track_count=len(items),
            items=list(items),
        )

    async def artist_detail(self, artist_id: str) -> ConnectorArtist:
        self._record("artist_detail", artist_id)
        return self.artists[artist_id]

    async def artist_top_tracks(self, artist_id: str) -> list[ConnectorTrack]:
        self._record("artist_top_tracks", artist_id)
        return list(self.top_tracks.get(artist_id, []))

    async def artist_albums(
        self, artist_id: str, album_type: AlbumType
    ) -> list[ConnectorAlbum]:
        self._record("artist_albums", artist_id, album_type)
        return list(self.albums.get((artist_id, album_type), []))

    async def album_tracks(self, album_id: str) -> list[ConnectorTrack]:
        self._record("album_tracks", album_id)
        return list(self.tracks_by_album.get(album_id, []))

    async def search_artists(self, query: str) -> list[ConnectorArtist]:
        self._record("search_artists", query)
        return list(self.search_results.get(query, []))[:5]


class ScriptedChooser:
    """Artist chooser that always picks the candidate at a fixed index."""

    def __init__(self, index: int = 0) -> None:
        self.index = index
        self.offered: list[list[ConnectorArtist]] = []

    def choose_artist(self, candidates: list[ConnectorArtist]) -> ConnectorArtist:
        self.offered.append(list(candidates))
        return candidates[self.index]
