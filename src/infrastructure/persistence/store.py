"""SQL-backed store implementing StoreProtocol.

Every operation runs in its own session and commits on success, so anything
stored before a later failure stays stored.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.config import get_logger
from src.domain.entities import Listen, Playlist
from src.infrastructure.persistence.database.db_connection import get_session
from src.infrastructure.persistence.repositories.listens import ListenRepository
from src.infrastructure.persistence.repositories.playlists import PlaylistRepository

logger = get_logger(__name__)


class DatabaseStore:
    """Listens, automated playlists and artist links in a SQL database."""

    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession] | None = None
    ) -> None:
        """Initialize with an optional session factory.

        Args:
            session_factory: Factory to open sessions with, the global one if None
        """
        self.session_factory = session_factory

    async def append_listen(self, listen: Listen) -> None:
        async with get_session(self.session_factory) as session:
            await ListenRepository(session).append(listen)

    async def latest_listen(self) -> Listen | None:
        async with get_session(self.session_factory) as session:
            return await ListenRepository(session).latest()

    async def all_listens(self) -> list[Listen]:
        async with get_session(self.session_factory) as session:
            return await ListenRepository(session).all()

    async def create_automated_playlist(self, playlist_id: str, name: str) -> None:
        async with get_session(self.session_factory) as session:
            await PlaylistRepository(session).create(playlist_id, name)

    async def all_automated_playlists(self) -> list[Playlist]:
        async with get_session(self.session_factory) as session:
            return await PlaylistRepository(session).all()

    async def playlist_by_name(self, name: str) -> Playlist | None:
        async with get_session(self.session_factory) as session:
            return await PlaylistRepository(session).by_name(name)

    async def link(self, playlist_id: str, artist_id: str) -> None:
        async with get_session(self.session_factory) as session:
            await PlaylistRepository(session).link(playlist_id, artist_id)

    async def unlink(self, playlist_id: str, artist_id: str) -> None:
        async with get_session(self.session_factory) as session:
            await PlaylistRepository(session).unlink(playlist_id, artist_id)
