"""Listening history transforms for throwback composition.

Pure functions over listen sequences. A throwback favours songs that were
played often in the past but not recently: any song with a listen inside the
look-back window is excluded entirely, even if it also has older listens.
"""

from collections.abc import Iterable, Sequence
from datetime import date, datetime

from toolz import frequencies, take

from src.domain.entities import Listen, ThrowbackEntry


def recent_song_ids(listens: Iterable[Listen], cutoff: datetime) -> set[str]:
    """Song ids with at least one listen strictly after the cutoff."""
    return {listen.song_id for listen in listens if listen.played_at > cutoff}


def eligible_song_ids(listens: Sequence[Listen], cutoff: datetime) -> list[str]:
    """Song id of every listen whose song was not replayed after the cutoff.

    One entry per listen, in history order, so the result can be counted.
    """
    blacklisted = recent_song_ids(listens, cutoff)
    return [listen.song_id for listen in listens if listen.song_id not in blacklisted]


def rank_throwback(
    listens: Sequence[Listen], cutoff: datetime, size: int | None = None
) -> list[ThrowbackEntry]:
    """Rank eligible songs by play count, most played first.

    Equal counts keep the order in which songs first appear in the history.

    Args:
        listens: Full listening history in store order
        cutoff: Songs listened to after this instant are excluded
        size: Maximum number of entries to return (all when None)

    Returns:
        Ranked throwback entries
    """
    # frequencies() preserves first-seen order and sorted() is stable
    counts = frequencies(eligible_song_ids(listens, cutoff))
    ranked = sorted(counts.items(), key=lambda pair: pair[1], reverse=True)
    entries = (ThrowbackEntry(song_id=song_id, count=count) for song_id, count in ranked)
    return list(entries) if size is None else list(take(size, entries))


def throwback_name(today: date, prefix: str = "Throwback") -> str:
    """Default playlist name for a throwback created on the given day."""
    return f"{prefix} - {today.isoformat()}"
