"""Tests for incremental listening history ingestion."""

import pytest

from src.application.use_cases import UpdateHistoryUseCase
from src.domain.errors import ServiceError, StorageError


class TestUpdateHistoryUseCase:
    """Test the high-water mark driven ingestion loop."""

    async def test_first_run_appends_every_recent_play(self, store, music, listen_at):
        music.recent = [
            listen_at("spotify:track:1", hours=3),
            listen_at("spotify:track:2", hours=2),
            listen_at("spotify:track:1", hours=1),
        ]

        result = await UpdateHistoryUseCase(store=store, music=music).execute()

        assert result.listens_added == 3
        assert store.listens == music.recent
        assert music.calls_to("recent_plays") == [(50, None)]

    async def test_second_run_without_new_plays_appends_nothing(
        self, store, music, listen_at
    ):
        music.recent = [listen_at("spotify:track:1", hours=2)]
        use_case = UpdateHistoryUseCase(store=store, music=music)

        await use_case.execute()
        result = await use_case.execute()

        assert result.listens_added == 0
        assert len(store.listens) == 1

    async def test_fetches_only_after_latest_stored_listen(self, store, music, listen_at):
        latest = listen_at("spotify:track:old", days=1)
        store.listens = [listen_at("spotify:track:older", days=2), latest]
        music.recent = [
            listen_at("spotify:track:old", days=1),
            listen_at("spotify:track:new", hours=1),
        ]

        result = await UpdateHistoryUseCase(store=store, music=music, limit=10).execute()

        assert result.listens_added == 1
        assert store.listens[-1].song_id == "spotify:track:new"
        assert music.calls_to("recent_plays") == [(10, latest.played_at)]

    async def test_service_failure_propagates_and_stores_nothing(self, store, music):
        music.fail_on.add("recent_plays")

        with pytest.raises(ServiceError):
            await UpdateHistoryUseCase(store=store, music=music).execute()

        assert store.listens == []

    async def test_storage_failure_keeps_earlier_appends(self, store, music, listen_at):
        music.recent = [
            listen_at("spotify:track:1", hours=2),
            listen_at("spotify:track:2", hours=1),
        ]
        original_append = store.append_listen
        calls = 0

        async def failing_append(listen):
            nonlocal calls
            calls += 1
            if calls == 2:
                raise StorageError("disk full")
            await original_append(listen)

        store.append_listen = failing_append

        with pytest.raises(StorageError):
            await UpdateHistoryUseCase(store=store, music=music).execute()

        assert [listen.song_id for listen in store.listens] == ["spotify:track:1"]
