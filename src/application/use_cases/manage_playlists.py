"""Automated playlist management and artist links.

Creates or adopts automated playlists, links artists to them (asking the user
to pick among search results), unlinks artists and lists or describes the
playlists the engine knows about.
"""

import asyncio

from attrs import define
from toolz import unique

from src.config import get_logger
from src.domain.entities import ConnectorArtist, Playlist, PlaylistDetail
from src.domain.errors import (
    AmbiguousMatchError,
    NoMatchError,
    NotFoundError,
    ValidationError,
)
from src.domain.repositories import (
    ArtistChooserProtocol,
    MusicServiceConnector,
    StoreProtocol,
)

logger = get_logger(__name__)


@define(frozen=True, slots=True)
class PlaylistOverview:
    """Remote playlist detail together with its linked artists' profiles."""

    playlist: Playlist
    detail: PlaylistDetail
    artists: list[ConnectorArtist]


@define(frozen=True, slots=True)
class LinkResult:
    """Outcome of linking an artist to an automated playlist."""

    playlist: Playlist
    artist: ConnectorArtist
    seeded_track_ids: list[str]


async def resolve_playlist(store: StoreProtocol, name: str) -> Playlist:
    """Look up an automated playlist by name.

    Raises:
        NotFoundError: If no automated playlist has that name
    """
    playlist = await store.playlist_by_name(name)
    if playlist is None:
        raise NotFoundError(f"No automated playlist named '{name}'")
    return playlist


@define(slots=True)
class ManagePlaylistsUseCase:
    """Registry of automated playlists and the artists linked to them."""

    store: StoreProtocol
    music: MusicServiceConnector
    chooser: ArtistChooserProtocol | None = None

    async def create(self, name: str) -> Playlist:
        """Create a remote playlist and record it as automated."""
        remote = await self.music.create_playlist(name)
        await self.store.create_automated_playlist(remote.id, remote.name)
        logger.info("Created automated playlist '{}'", remote.name, playlist_id=remote.id)
        return Playlist(id=remote.id, name=remote.name, automated=True)

    async def automate(self, name: str) -> Playlist:
        """Adopt an existing remote playlist, matched by exact name.

        Raises:
            NotFoundError: If the user has no playlist with that name
        """
        remote_playlists = await self.music.list_user_playlists()
        match = next((p for p in remote_playlists if p.name == name), None)
        if match is None:
            raise NotFoundError(f"No playlist named '{name}' in your library")

        await self.store.create_automated_playlist(match.id, match.name)
        logger.info("Automated playlist '{}'", match.name, playlist_id=match.id)
        return match.as_automated()

    async def link(
        self, playlist_name: str, artist_query: str, seed: int | None = None
    ) -> LinkResult:
        """Link an artist, chosen interactively among search results.

        Args:
            playlist_name: Name of an automated playlist
            artist_query: Free-text artist search
            seed: When given, add this many of the artist's top tracks right away

        Raises:
            NotFoundError: If the playlist is not automated or the search is empty
            DuplicateLinkError: If the chosen artist is already linked
        """
        if seed is not None and seed < 1:
            raise ValidationError(f"Seed size must be at least 1, got {seed}")
        if self.chooser is None:
            raise ValidationError("Linking an artist requires an interactive chooser")

        playlist = await resolve_playlist(self.store, playlist_name)

        candidates = await self.music.search_artists(artist_query)
        if not candidates:
            raise NotFoundError(f"No artist matches '{artist_query}'")

        # Prompting blocks on stdin
        artist = await asyncio.to_thread(self.chooser.choose_artist, candidates)
        await self.store.link(playlist.id, artist.id)
        logger.info(
            "Linked {} to '{}'",
            artist.name,
            playlist.name,
            playlist_id=playlist.id,
            artist_id=artist.id,
        )

        seeded: list[str] = []
        if seed:
            top_tracks = await self.music.artist_top_tracks(artist.id)
            seeded = [track.id for track in top_tracks[:seed]]
            if seeded:
                await self.music.add_tracks(playlist.id, seeded)
                logger.info(f"Seeded '{playlist.name}' with {len(seeded)} tracks")

        return LinkResult(
            playlist=playlist.with_artist(artist.id),
            artist=artist,
            seeded_track_ids=seeded,
        )

    async def unlink(self, playlist_name: str, artist_query: str) -> ConnectorArtist:
        """Unlink the single linked artist matching the query.

        Never prompts: the search results are narrowed to the artists already
        linked to the playlist and exactly one must remain.

        Raises:
            NotFoundError: If the playlist is not automated
            NoMatchError: If no linked artist matches
            AmbiguousMatchError: If several linked artists match
        """
        playlist = await resolve_playlist(self.store, playlist_name)

        candidates = await self.music.search_artists(artist_query)
        linked = [artist for artist in candidates if artist.id in playlist.artists]

        if not linked:
            raise NoMatchError(
                f"No artist linked to '{playlist.name}' matches '{artist_query}'"
            )
        if len(linked) > 1:
            names = ", ".join(artist.name for artist in linked)
            raise AmbiguousMatchError(
                f"'{artist_query}' matches several artists linked to "
                f"'{playlist.name}': {names}"
            )

        artist = linked[0]
        await self.store.unlink(playlist.id, artist.id)
        logger.info(
            "Unlinked {} from '{}'",
            artist.name,
            playlist.name,
            playlist_id=playlist.id,
            artist_id=artist.id,
        )
        return artist

    async def list_playlists(self) -> list[Playlist]:
        """Automated playlists followed by the rest of the user's playlists.

        Each id appears once: the first stored entry wins over later stored
        entries and over the remote copy.
        """
        automated = await self.store.all_automated_playlists()
        remote = await self.music.list_user_playlists()

        return list(unique([*automated, *remote], key=lambda playlist: playlist.id))

    async def show_playlist(self, name: str) -> PlaylistOverview:
        """Remote detail of an automated playlist plus its artists' profiles."""
        playlist = await resolve_playlist(self.store, name)
        detail = await self.music.playlist_detail(playlist.id)

        artists = []
        for artist_id in sorted(playlist.artists):
            artists.append(await self.music.artist_detail(artist_id))

        return PlaylistOverview(playlist=playlist, detail=detail, artists=artists)
