"""Playlist-related domain entities.

Pure playlist representations and related value objects with zero external dependencies.
"""

from datetime import datetime

import attrs
from attrs import define, field, validators

from .catalog import ConnectorTrack
from .shared import ensure_utc


@define(frozen=True, slots=True)
class Playlist:
    """A playlist known to the engine.

    Automated playlists are the ones the engine keeps populated: their
    `artists` hold the ids of every artist linked to them. Plain user
    playlists come back from the music service with no artists and
    `automated=False`.
    """

    id: str = field(validator=validators.instance_of(str))
    name: str = field(validator=validators.instance_of(str))
    artists: frozenset[str] = field(factory=frozenset, converter=frozenset)
    automated: bool = False

    def with_artist(self, artist_id: str) -> "Playlist":
        """Create a new playlist with an additional linked artist."""
        return attrs.evolve(self, artists=self.artists | {artist_id})

    def as_automated(self) -> "Playlist":
        return attrs.evolve(self, automated=True)


@define(frozen=True, slots=True)
class PlaylistItem:
    """A track within a remote playlist with the time it was added."""

    track: ConnectorTrack
    added_at: datetime | None = field(default=None, converter=ensure_utc)


@define(frozen=True, slots=True)
class PlaylistDetail:
    """Full remote view of a playlist, including every item."""

    id: str
    name: str
    description: str | None = None
    follower_count: int = 0
    track_count: int = 0
    collaborative: bool = False
    public: bool = False
    items: list[PlaylistItem] = field(factory=list)

    @property
    def track_ids(self) -> list[str]:
        return [item.track.id for item in self.items]
