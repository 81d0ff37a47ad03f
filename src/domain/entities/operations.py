"""Operation result entities.

Summaries returned by use cases for logging and display. Never persisted.
"""

from attrs import define, field


@define(frozen=True, slots=True)
class HistoryUpdateResult:
    """Outcome of one listening history ingestion run."""

    listens_added: int = 0


@define(frozen=True, slots=True)
class ThrowbackResult:
    """Outcome of a throwback composition.

    `playlist_id` is None when no song was eligible and nothing was created.
    """

    playlist_id: str | None = None
    playlist_name: str | None = None
    song_ids: list[str] = field(factory=list)

    @property
    def created(self) -> bool:
        return self.playlist_id is not None


@define(frozen=True, slots=True)
class SyncResult:
    """Outcome of synchronizing one automated playlist."""

    playlist_id: str
    playlist_name: str
    tracks_added: int = 0
    artists_seeded: list[str] = field(factory=list)
    artists_updated: list[str] = field(factory=list)
