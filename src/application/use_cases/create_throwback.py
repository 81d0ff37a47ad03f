"""Throwback playlist composition from listening frequency.

Builds a one-off playlist of the songs played most often in the past,
excluding any song replayed inside the look-back window.
"""

from collections.abc import Callable
from datetime import UTC, datetime

from attrs import define, field

from src.config import get_config, get_logger
from src.domain.entities import ThrowbackPeriod, ThrowbackResult
from src.domain.errors import ValidationError
from src.domain.repositories import MusicServiceConnector, StoreProtocol
from src.domain.transforms import rank_throwback, throwback_name

logger = get_logger(__name__)


@define(frozen=True, slots=True)
class CreateThrowbackCommand:
    """Command for composing a throwback playlist."""

    name: str | None = None
    period: ThrowbackPeriod | None = None
    size: int | None = None

    def validate(self) -> None:
        if self.size is not None and self.size < 1:
            raise ValidationError(f"Throwback size must be at least 1, got {self.size}")
        if self.name is not None and not self.name.strip():
            raise ValidationError("Throwback playlist name cannot be empty")


@define(slots=True)
class CreateThrowbackUseCase:
    """Create a playlist from the user's most played, not recently replayed songs."""

    store: StoreProtocol
    music: MusicServiceConnector
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(UTC))

    async def execute(self, command: CreateThrowbackCommand) -> ThrowbackResult:
        """Compose and create the throwback playlist.

        Returns an empty result without creating anything when no song is
        eligible.
        """
        command.validate()

        now = self.clock()
        period = command.period or ThrowbackPeriod.parse(
            get_config("THROWBACK_PERIOD", "25w")
        )
        size = command.size or get_config("THROWBACK_SIZE", 50)
        cutoff = period.cutoff(now)

        history = await self.store.all_listens()
        entries = rank_throwback(history, cutoff, size)
        logger.debug(
            "Ranked throwback candidates",
            history_size=len(history),
            period=str(period),
            selected=len(entries),
        )

        if not entries:
            logger.info("No listens eligible for a throwback, nothing created")
            return ThrowbackResult()

        name = command.name or throwback_name(
            now.date(), get_config("THROWBACK_NAME_PREFIX", "Throwback")
        )
        playlist = await self.music.create_playlist(name)

        song_ids = [entry.song_id for entry in entries]
        await self.music.add_tracks(playlist.id, song_ids, insert_at=0)

        logger.info(f"Created throwback '{name}' with {len(song_ids)} tracks")
        return ThrowbackResult(
            playlist_id=playlist.id, playlist_name=name, song_ids=song_ids
        )
