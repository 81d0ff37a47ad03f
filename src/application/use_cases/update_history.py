"""Incremental ingestion of the user's recently played tracks.

Each run fetches at most one page of recent plays newer than the latest stored
listen and appends them to the store in the order the service returned them.
Callers wanting a deeper backfill must run the update repeatedly.
"""

from attrs import define

from src.config import get_config, get_logger
from src.domain.entities import HistoryUpdateResult
from src.domain.repositories import MusicServiceConnector, StoreProtocol

logger = get_logger(__name__)


@define(slots=True)
class UpdateHistoryUseCase:
    """Append listens played since the stored high-water mark."""

    store: StoreProtocol
    music: MusicServiceConnector
    limit: int | None = None

    async def execute(self) -> HistoryUpdateResult:
        """Fetch recent plays and persist them.

        Any failure aborts the loop immediately. Listens appended before the
        failure stay persisted.
        """
        limit = self.limit or get_config("HISTORY_RECENT_LIMIT", 50)

        last_listen = await self.store.latest_listen()
        after = last_listen.played_at if last_listen is not None else None
        logger.debug("Fetching recent plays", limit=limit, after=after)

        recent = await self.music.recent_plays(limit=limit, after=after)

        added = 0
        for listen in recent:
            await self.store.append_listen(listen)
            added += 1

        logger.info(f"Ingested {added} new listens")
        return HistoryUpdateResult(listens_added=added)
