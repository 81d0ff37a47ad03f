"""Curation service providing a single entry point to every engine operation.

The CLI builds one service per invocation with the store, music service and
artist chooser selected at startup, then calls exactly one method on it.
Each method delegates to its use case.
"""

from collections.abc import Callable
from datetime import UTC, datetime

from src.application.use_cases import (
    CreateThrowbackCommand,
    CreateThrowbackUseCase,
    LinkResult,
    ManagePlaylistsUseCase,
    PlaylistOverview,
    UpdateAllPlaylistsUseCase,
    UpdateHistoryUseCase,
)
from src.config import get_logger
from src.domain.entities import (
    ConnectorArtist,
    HistoryUpdateResult,
    Playlist,
    SyncResult,
    ThrowbackPeriod,
    ThrowbackResult,
)
from src.domain.repositories import (
    ArtistChooserProtocol,
    MusicServiceConnector,
    StoreProtocol,
)

logger = get_logger(__name__)


class CurationService:
    """Facade over the history, throwback, playlist and sync use cases."""

    def __init__(
        self,
        store: StoreProtocol,
        music: MusicServiceConnector,
        chooser: ArtistChooserProtocol | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize with injected collaborators.

        Args:
            store: Persistence adapter for listens, playlists and links
            music: Remote music service adapter
            chooser: Interactive artist disambiguation, only needed to link
            clock: Source of the current time, UTC now by default
        """
        self.store = store
        self.music = music
        self.chooser = chooser
        self.clock = clock or (lambda: datetime.now(UTC))

    def _playlists(self) -> ManagePlaylistsUseCase:
        return ManagePlaylistsUseCase(
            store=self.store, music=self.music, chooser=self.chooser
        )

    # History

    async def update_history(self) -> HistoryUpdateResult:
        return await UpdateHistoryUseCase(store=self.store, music=self.music).execute()

    async def create_throwback(
        self,
        name: str | None = None,
        period: ThrowbackPeriod | None = None,
        size: int | None = None,
    ) -> ThrowbackResult:
        command = CreateThrowbackCommand(name=name, period=period, size=size)
        use_case = CreateThrowbackUseCase(
            store=self.store, music=self.music, clock=self.clock
        )
        return await use_case.execute(command)

    # Playlists

    async def create_playlist(self, name: str) -> Playlist:
        return await self._playlists().create(name)

    async def automate_playlist(self, name: str) -> Playlist:
        return await self._playlists().automate(name)

    async def link_artist(
        self, playlist_name: str, artist_query: str, seed: int | None = None
    ) -> LinkResult:
        return await self._playlists().link(playlist_name, artist_query, seed)

    async def unlink_artist(
        self, playlist_name: str, artist_query: str
    ) -> ConnectorArtist:
        return await self._playlists().unlink(playlist_name, artist_query)

    async def list_playlists(self) -> list[Playlist]:
        return await self._playlists().list_playlists()

    async def show_playlist(self, name: str) -> PlaylistOverview:
        return await self._playlists().show_playlist(name)

    async def update_playlists(self) -> list[SyncResult]:
        """Synchronize every automated playlist with its artists' new releases."""
        results = await UpdateAllPlaylistsUseCase(
            store=self.store, music=self.music
        ).execute()
        logger.info(
            f"Updated {len(results)} playlists, "
            f"{sum(result.tracks_added for result in results)} tracks added"
        )
        return results


def create_curation_service(
    store: StoreProtocol,
    music: MusicServiceConnector,
    chooser: ArtistChooserProtocol | None = None,
) -> CurationService:
    """Create a curation service wired to the given adapters."""
    return CurationService(store=store, music=music, chooser=chooser)
