"""Pure transforms over listening history and playlist contents."""

from .history import eligible_song_ids, rank_throwback, recent_song_ids, throwback_name
from .releases import flatten_track_ids, last_added_by_artist, unseen_albums

__all__ = [
    "eligible_song_ids",
    "flatten_track_ids",
    "last_added_by_artist",
    "rank_throwback",
    "recent_song_ids",
    "throwback_name",
    "unseen_albums",
]
