"""Release diff transforms for automated playlist synchronization.

Pure functions deciding which releases of a linked artist are not yet
reflected in a playlist.
"""

from collections.abc import Iterable
from datetime import datetime
from itertools import chain

from toolz import concat, unique

from src.domain.entities import ConnectorAlbum, ConnectorTrack, PlaylistItem


def last_added_by_artist(items: Iterable[PlaylistItem]) -> dict[str, datetime]:
    """Latest `added_at` of any track credited to each artist.

    Items without an `added_at` attribute nothing. Artists with no track in
    the playlist are absent from the result.
    """
    last_added: dict[str, datetime] = {}
    for item in items:
        if item.added_at is None:
            continue
        for artist_id in item.track.artist_ids:
            current = last_added.get(artist_id)
            if current is None or item.added_at > current:
                last_added[artist_id] = item.added_at
    return last_added


def unseen_albums(
    album_groups: Iterable[Iterable[ConnectorAlbum]], since: datetime
) -> list[ConnectorAlbum]:
    """Day-precision releases strictly newer than `since`.

    Albums are de-duplicated by id across groups, keeping the first occurrence.

    Args:
        album_groups: One album list per release type, in query order
        since: Instant of the artist's most recent addition to the playlist
    """
    merged = unique(chain.from_iterable(album_groups), key=lambda album: album.id)
    return [album for album in merged if album.released_after(since)]


def flatten_track_ids(track_lists: Iterable[Iterable[ConnectorTrack]]) -> list[str]:
    """Concatenate track lists into ids, preserving order."""
    return [track.id for track in concat(track_lists)]
