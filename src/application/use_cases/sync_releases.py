"""Release synchronization for automated playlists.

For every artist linked to an automated playlist, works out which of the
artist's releases came out after the artist's latest addition to the playlist
and appends their tracks. Artists never added before get their top tracks
instead.
"""

from attrs import define
from toolz import unique

from src.config import get_config, get_logger
from src.domain.entities import AlbumType, Playlist, SyncResult
from src.domain.repositories import MusicServiceConnector, StoreProtocol
from src.domain.transforms import (
    flatten_track_ids,
    last_added_by_artist,
    unseen_albums,
)

logger = get_logger(__name__)


def _album_types() -> list[AlbumType]:
    configured = get_config("SYNC_ALBUM_TYPES", ["album", "single"])
    return [AlbumType(value) for value in configured]


@define(slots=True)
class SyncPlaylistReleasesUseCase:
    """Bring one automated playlist up to date with its artists' releases."""

    music: MusicServiceConnector
    cold_start_size: int | None = None

    async def execute(self, playlist: Playlist) -> SyncResult:
        """Append new releases of every linked artist.

        Artists are processed in id order and every remote call is awaited in
        turn. The first failure aborts the playlist; nothing is added for it in
        that case since tracks are only sent once all artists were diffed.
        """
        cold_start_size = self.cold_start_size or get_config("SYNC_COLD_START_SIZE", 5)

        detail = await self.music.playlist_detail(playlist.id)
        last_added = last_added_by_artist(detail.items)

        new_track_ids: list[str] = []
        seeded: list[str] = []
        updated: list[str] = []

        for artist_id in sorted(playlist.artists):
            since = last_added.get(artist_id)

            if since is None:
                top_tracks = await self.music.artist_top_tracks(artist_id)
                track_ids = [track.id for track in top_tracks[:cold_start_size]]
                seeded.append(artist_id)
                logger.debug(
                    "Cold start for artist", artist_id=artist_id, tracks=len(track_ids)
                )
            else:
                album_groups = []
                for album_type in _album_types():
                    album_groups.append(
                        await self.music.artist_albums(artist_id, album_type)
                    )

                albums = unseen_albums(album_groups, since)
                track_lists = []
                for album in albums:
                    track_lists.append(await self.music.album_tracks(album.id))
                track_ids = flatten_track_ids(track_lists)

                if albums:
                    updated.append(artist_id)
                logger.debug(
                    "Diffed artist releases",
                    artist_id=artist_id,
                    since=since.isoformat(),
                    new_albums=len(albums),
                    tracks=len(track_ids),
                )

            new_track_ids.extend(track_ids)

        if new_track_ids:
            await self.music.add_tracks(playlist.id, new_track_ids)

        logger.info(
            "Synced '{}': {} tracks added",
            playlist.name,
            len(new_track_ids),
            playlist_id=playlist.id,
            seeded=len(seeded),
            updated=len(updated),
        )
        return SyncResult(
            playlist_id=playlist.id,
            playlist_name=playlist.name,
            tracks_added=len(new_track_ids),
            artists_seeded=seeded,
            artists_updated=updated,
        )


@define(slots=True)
class UpdateAllPlaylistsUseCase:
    """Synchronize every automated playlist, one after the other.

    Each playlist id is synced once. Stops at the first playlist that fails
    and lets the error propagate; playlists synced before it keep their
    additions.
    """

    store: StoreProtocol
    music: MusicServiceConnector

    async def execute(self) -> list[SyncResult]:
        stored = await self.store.all_automated_playlists()
        playlists = list(unique(stored, key=lambda playlist: playlist.id))
        logger.info(f"Updating {len(playlists)} automated playlists")

        sync = SyncPlaylistReleasesUseCase(music=self.music)
        results = []
        for playlist in playlists:
            results.append(await sync.execute(playlist))
        return results
