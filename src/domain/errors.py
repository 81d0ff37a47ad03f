"""Domain error hierarchy.

Every failure the curation engine reports derives from NeedledropError so the
CLI can print a clean message for any of them. Only InputError is recovered
locally (by re-prompting); everything else propagates to the invoking command.
"""


class NeedledropError(Exception):
    """Base class for all curation engine errors."""


class ServiceError(NeedledropError):
    """The remote music service rejected or failed a request."""


class StorageError(NeedledropError):
    """The persistence backend failed to read or write."""


class NotFoundError(NeedledropError):
    """A playlist or artist could not be found."""


class DuplicateLinkError(NeedledropError):
    """The artist is already linked to the playlist."""

    def __init__(self, playlist_id: str, artist_id: str) -> None:
        super().__init__(f"Artist {artist_id} is already linked to playlist {playlist_id}")
        self.playlist_id = playlist_id
        self.artist_id = artist_id


class AmbiguousMatchError(NeedledropError):
    """An artist query matched more than one linked artist."""


class NoMatchError(NeedledropError):
    """An artist query matched none of the linked artists."""


class ValidationError(NeedledropError):
    """An argument is outside its accepted range or malformed."""


class InputError(NeedledropError):
    """Interactive input could not be interpreted."""
