"""Music catalog entities as reported by the remote music service.

The engine never owns these records; it only reads them to decide what to add.
"""

from datetime import date, datetime
from enum import StrEnum

from attrs import define, field, validators

from .shared import start_of_day


class AlbumType(StrEnum):
    """Release groups the service can filter an artist's catalog by."""

    ALBUM = "album"
    SINGLE = "single"
    COMPILATION = "compilation"
    APPEARS_ON = "appears_on"


class ReleaseDatePrecision(StrEnum):
    """How precisely the service knows a release date."""

    DAY = "day"
    MONTH = "month"
    YEAR = "year"


@define(frozen=True, slots=True)
class ConnectorArtist:
    """Artist profile or search candidate."""

    id: str = field(validator=validators.instance_of(str))
    name: str = field(validator=validators.instance_of(str))
    popularity: int = 0
    follower_count: int = 0


@define(frozen=True, slots=True)
class ConnectorTrack:
    """Track with the artists credited on it."""

    id: str = field(validator=validators.instance_of(str))
    name: str = ""
    artists: list[ConnectorArtist] = field(factory=list)

    @property
    def artist_ids(self) -> list[str]:
        return [artist.id for artist in self.artists]


@define(frozen=True, slots=True)
class ConnectorAlbum:
    """A release in an artist's catalog."""

    id: str = field(validator=validators.instance_of(str))
    name: str = ""
    release_date: date | None = None
    precision: ReleaseDatePrecision = field(
        default=ReleaseDatePrecision.DAY, converter=ReleaseDatePrecision
    )
    album_type: AlbumType = field(default=AlbumType.ALBUM, converter=AlbumType)

    @property
    def released_at(self) -> datetime | None:
        """Release instant (midnight UTC), only known for day-precision releases."""
        if self.release_date is None or self.precision != ReleaseDatePrecision.DAY:
            return None
        return start_of_day(self.release_date)

    def released_after(self, instant: datetime) -> bool:
        released_at = self.released_at
        return released_at is not None and released_at > instant
