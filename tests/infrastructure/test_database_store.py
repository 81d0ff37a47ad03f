"""Tests for the SQL store, its repositories and the store factory."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from src.application.use_cases import ManagePlaylistsUseCase
from src.config import Settings
from src.domain.entities import Listen, Playlist
from src.domain.errors import DuplicateLinkError, NotFoundError, StorageError
from src.infrastructure.persistence.database.db_connection import get_session
from src.infrastructure.persistence.factories import create_store
from src.infrastructure.persistence.file_store import FileStore
from src.infrastructure.persistence.store import DatabaseStore


@pytest.fixture
def db_store(session_factory):
    return DatabaseStore(session_factory)


def at(hour: int) -> datetime:
    return datetime(2024, 6, 1, hour, tzinfo=UTC)


class TestDatabaseStoreListens:
    """Test listening history persistence."""

    async def test_empty_store_has_no_history(self, db_store):
        assert await db_store.all_listens() == []
        assert await db_store.latest_listen() is None

    async def test_listens_keep_insertion_order_and_duplicates(self, db_store):
        listens = [
            Listen("spotify:track:2", at(9)),
            Listen("spotify:track:1", at(8)),
            Listen("spotify:track:2", at(9)),
        ]
        for listen in listens:
            await db_store.append_listen(listen)

        assert await db_store.all_listens() == listens

    async def test_latest_listen_is_greatest_played_at(self, db_store):
        for listen in [Listen("a", at(10)), Listen("b", at(12)), Listen("c", at(11))]:
            await db_store.append_listen(listen)

        latest = await db_store.latest_listen()

        assert latest == Listen("b", at(12))
        assert latest.played_at.tzinfo is not None


class TestDatabaseStorePlaylists:
    """Test automated playlists and artist links."""

    async def test_created_playlist_starts_without_artists(self, db_store):
        await db_store.create_automated_playlist("spotify:playlist:1", "Radar")

        playlist = await db_store.playlist_by_name("Radar")

        assert playlist.id == "spotify:playlist:1"
        assert playlist.artists == frozenset()
        assert playlist.automated

    async def test_recording_again_renames(self, db_store):
        await db_store.create_automated_playlist("spotify:playlist:1", "Radar")
        await db_store.create_automated_playlist("spotify:playlist:1", "Radar II")

        playlists = await db_store.all_automated_playlists()

        assert [(p.id, p.name) for p in playlists] == [("spotify:playlist:1", "Radar II")]

    async def test_automating_twice_lists_the_playlist_once(self, db_store, music):
        music.user_playlists = [Playlist(id="spotify:playlist:x", name="Radar")]
        manage = ManagePlaylistsUseCase(store=db_store, music=music)

        await manage.automate("Radar")
        await manage.automate("Radar")

        assert [p.id for p in await manage.list_playlists()] == ["spotify:playlist:x"]

    async def test_links_attach_to_their_playlist(self, db_store):
        await db_store.create_automated_playlist("spotify:playlist:1", "One")
        await db_store.create_automated_playlist("spotify:playlist:2", "Two")
        await db_store.link("spotify:playlist:1", "spotify:artist:a")
        await db_store.link("spotify:playlist:1", "spotify:artist:b")
        await db_store.link("spotify:playlist:2", "spotify:artist:a")

        playlists = await db_store.all_automated_playlists()

        assert [(p.name, p.artists) for p in playlists] == [
            ("One", {"spotify:artist:a", "spotify:artist:b"}),
            ("Two", {"spotify:artist:a"}),
        ]

    async def test_duplicate_link_is_rejected(self, db_store):
        await db_store.create_automated_playlist("spotify:playlist:1", "One")
        await db_store.link("spotify:playlist:1", "spotify:artist:a")

        with pytest.raises(DuplicateLinkError):
            await db_store.link("spotify:playlist:1", "spotify:artist:a")

        assert (await db_store.playlist_by_name("One")).artists == {"spotify:artist:a"}

    async def test_link_to_unknown_playlist_is_rejected(self, db_store):
        with pytest.raises(NotFoundError):
            await db_store.link("spotify:playlist:9", "spotify:artist:a")

    async def test_unlink_removes_only_that_pair(self, db_store):
        await db_store.create_automated_playlist("spotify:playlist:1", "One")
        await db_store.link("spotify:playlist:1", "spotify:artist:a")
        await db_store.link("spotify:playlist:1", "spotify:artist:b")

        await db_store.unlink("spotify:playlist:1", "spotify:artist:a")

        assert (await db_store.playlist_by_name("One")).artists == {"spotify:artist:b"}

    async def test_unlink_missing_pair_is_rejected(self, db_store):
        await db_store.create_automated_playlist("spotify:playlist:1", "One")

        with pytest.raises(NotFoundError):
            await db_store.unlink("spotify:playlist:1", "spotify:artist:a")


class TestGetSession:
    """Test transaction handling around a session."""

    async def test_failed_commit_rolls_back_and_raises_storage_error(self):
        session = MagicMock()
        session.commit = AsyncMock(
            side_effect=OperationalError("COMMIT", {}, Exception("database is locked"))
        )
        session.rollback = AsyncMock()
        session.close = AsyncMock()

        with pytest.raises(StorageError, match="commit failed"):
            async with get_session(MagicMock(return_value=session)):
                pass

        session.rollback.assert_awaited_once()
        session.close.assert_awaited_once()

    async def test_error_in_block_rolls_back_without_commit(self):
        session = MagicMock()
        session.commit = AsyncMock()
        session.rollback = AsyncMock()
        session.close = AsyncMock()

        with pytest.raises(NotFoundError):
            async with get_session(MagicMock(return_value=session)):
                raise NotFoundError("gone")

        session.commit.assert_not_awaited()
        session.rollback.assert_awaited_once()
        session.close.assert_awaited_once()


class TestCreateStore:
    """Test backend selection."""

    async def test_file_backend(self, tmp_path):
        settings = Settings(storage={"backend": "file", "file_path": tmp_path})

        store = await create_store(settings)

        assert isinstance(store, FileStore)
        assert store.directory == tmp_path

    async def test_database_backend_initializes_schema(self):
        settings = Settings(storage={"backend": "database"})

        with patch(
            "src.infrastructure.persistence.factories.init_db", new_callable=AsyncMock
        ) as mock_init_db:
            store = await create_store(settings)

        assert isinstance(store, DatabaseStore)
        mock_init_db.assert_awaited_once()
