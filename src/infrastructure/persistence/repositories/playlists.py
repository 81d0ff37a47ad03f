"""Playlist repository for automated playlists and their artist links."""

from attrs import define
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import get_logger
from src.domain.entities import Playlist
from src.domain.errors import DuplicateLinkError, NotFoundError
from src.infrastructure.persistence.database.db_models import (
    DBArtistLink,
    DBAutomatedPlaylist,
)
from src.infrastructure.persistence.repositories.repo_decorator import db_operation

logger = get_logger(__name__)


@define(frozen=True, slots=True)
class PlaylistMapper:
    """Maps DBAutomatedPlaylist and its links to the Playlist domain model."""

    @staticmethod
    def to_domain(db_model: DBAutomatedPlaylist) -> Playlist:
        return Playlist(
            id=db_model.playlist_id,
            name=db_model.name,
            artists=[link.artist_id for link in db_model.links],
            automated=True,
        )


class PlaylistRepository:
    """Repository for automated playlists and artist links."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.mapper = PlaylistMapper()

    async def _find(self, playlist_id: str) -> DBAutomatedPlaylist | None:
        stmt = select(DBAutomatedPlaylist).where(
            DBAutomatedPlaylist.playlist_id == playlist_id
        )
        return (await self.session.scalars(stmt)).first()

    async def _find_link(self, playlist_id: str, artist_id: str) -> DBArtistLink | None:
        stmt = select(DBArtistLink).where(
            DBArtistLink.playlist_id == playlist_id,
            DBArtistLink.artist_id == artist_id,
        )
        return (await self.session.scalars(stmt)).first()

    @db_operation("create_automated_playlist")
    async def create(self, playlist_id: str, name: str) -> None:
        """Record a playlist as automated. Recording it again renames it."""
        existing = await self._find(playlist_id)
        if existing is not None:
            existing.name = name
        else:
            self.session.add(DBAutomatedPlaylist(playlist_id=playlist_id, name=name))
        await self.session.flush()

    @db_operation("all_automated_playlists")
    async def all(self) -> list[Playlist]:
        stmt = select(DBAutomatedPlaylist).order_by(DBAutomatedPlaylist.id)
        result = await self.session.scalars(stmt)
        return [self.mapper.to_domain(db_playlist) for db_playlist in result]

    @db_operation("playlist_by_name")
    async def by_name(self, name: str) -> Playlist | None:
        stmt = (
            select(DBAutomatedPlaylist)
            .where(DBAutomatedPlaylist.name == name)
            .order_by(DBAutomatedPlaylist.id)
        )
        db_playlist = (await self.session.scalars(stmt)).first()
        return self.mapper.to_domain(db_playlist) if db_playlist is not None else None

    @db_operation("link_artist")
    async def link(self, playlist_id: str, artist_id: str) -> None:
        if await self._find(playlist_id) is None:
            raise NotFoundError(f"Playlist {playlist_id} is not automated")
        if await self._find_link(playlist_id, artist_id) is not None:
            raise DuplicateLinkError(playlist_id, artist_id)

        self.session.add(DBArtistLink(playlist_id=playlist_id, artist_id=artist_id))
        await self.session.flush()

    @db_operation("unlink_artist")
    async def unlink(self, playlist_id: str, artist_id: str) -> None:
        result = await self.session.execute(
            delete(DBArtistLink).where(
                DBArtistLink.playlist_id == playlist_id,
                DBArtistLink.artist_id == artist_id,
            )
        )
        if result.rowcount == 0:
            raise NotFoundError(
                f"Artist {artist_id} is not linked to playlist {playlist_id}"
            )
