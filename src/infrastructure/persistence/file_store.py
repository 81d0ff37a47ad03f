"""CSV file store implementing StoreProtocol.

Three header-less CSV files live in one directory:

- ``history``: ``song_id,played_at`` (ISO 8601), one row per listen
- ``playlist``: ``playlist_id,name``, one row per automated playlist
- ``links``: ``playlist_id,artist_id``, one row per artist link

Rows are appended; unlinking rewrites the links file without the removed
row. File access is blocking and runs in a worker thread.
"""

import asyncio
from collections.abc import Callable, Iterator
import csv
from datetime import datetime
import functools
from pathlib import Path
from typing import Any

from src.config import get_logger
from src.domain.entities import Listen, Playlist
from src.domain.errors import DuplicateLinkError, NotFoundError, StorageError

logger = get_logger(__name__)

HISTORY_FILE = "history"
PLAYLIST_FILE = "playlist"
LINKS_FILE = "links"


def file_operation(operation_name: str | None = None):
    """Run a blocking store method in a thread, reporting I/O failures as StorageError."""

    def decorator(func: Callable[..., Any]):
        op_name = operation_name or func.__name__

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await asyncio.to_thread(func, *args, **kwargs)
            except (OSError, csv.Error, ValueError) as e:
                logger.error(f"File store error in {op_name}: {e}")
                raise StorageError(f"File store failed in {op_name}: {e}") from e

        return wrapper

    return decorator


class FileStore:
    """Listens, automated playlists and artist links in plain CSV files."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def _path(self, file_name: str) -> Path:
        return self.directory / file_name

    def _rows(self, file_name: str) -> Iterator[list[str]]:
        path = self._path(file_name)
        if not path.exists():
            return
        with path.open(newline="", encoding="utf-8") as f:
            for row in csv.reader(f):
                if row:
                    yield row

    def _append_row(self, file_name: str, row: list[str]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        with self._path(file_name).open("a", newline="", encoding="utf-8") as f:
            csv.writer(f).writerow(row)

    def _write_rows(self, file_name: str, rows: list[list[str]]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        with self._path(file_name).open("w", newline="", encoding="utf-8") as f:
            csv.writer(f).writerows(rows)

    def _read_listens(self) -> list[Listen]:
        return [
            Listen(song_id=song_id, played_at=datetime.fromisoformat(played_at))
            for song_id, played_at in self._rows(HISTORY_FILE)
        ]

    def _read_playlists(self) -> list[Playlist]:
        artists: dict[str, list[str]] = {}
        for playlist_id, artist_id in self._rows(LINKS_FILE):
            artists.setdefault(playlist_id, []).append(artist_id)

        return [
            Playlist(
                id=playlist_id,
                name=name,
                artists=artists.get(playlist_id, []),
                automated=True,
            )
            for playlist_id, name in self._rows(PLAYLIST_FILE)
        ]

    @file_operation("append_listen")
    def append_listen(self, listen: Listen) -> None:
        self._append_row(HISTORY_FILE, [listen.song_id, listen.played_at.isoformat()])

    @file_operation("latest_listen")
    def latest_listen(self) -> Listen | None:
        latest = None
        for listen in self._read_listens():
            if latest is None or listen.played_at >= latest.played_at:
                latest = listen
        return latest

    @file_operation("all_listens")
    def all_listens(self) -> list[Listen]:
        return self._read_listens()

    @file_operation("create_automated_playlist")
    def create_automated_playlist(self, playlist_id: str, name: str) -> None:
        """Record a playlist as automated. Recording it again renames it."""
        rows = list(self._rows(PLAYLIST_FILE))
        if not any(row[0] == playlist_id for row in rows):
            self._append_row(PLAYLIST_FILE, [playlist_id, name])
            return
        self._write_rows(
            PLAYLIST_FILE,
            [[row[0], name] if row[0] == playlist_id else row for row in rows],
        )

    @file_operation("all_automated_playlists")
    def all_automated_playlists(self) -> list[Playlist]:
        return self._read_playlists()

    @file_operation("playlist_by_name")
    def playlist_by_name(self, name: str) -> Playlist | None:
        return next(
            (playlist for playlist in self._read_playlists() if playlist.name == name),
            None,
        )

    @file_operation("link_artist")
    def link(self, playlist_id: str, artist_id: str) -> None:
        if not any(row[0] == playlist_id for row in self._rows(PLAYLIST_FILE)):
            raise NotFoundError(f"Playlist {playlist_id} is not automated")
        if [playlist_id, artist_id] in list(self._rows(LINKS_FILE)):
            raise DuplicateLinkError(playlist_id, artist_id)
        self._append_row(LINKS_FILE, [playlist_id, artist_id])

    @file_operation("unlink_artist")
    def unlink(self, playlist_id: str, artist_id: str) -> None:
        links = list(self._rows(LINKS_FILE))
        remaining = [row for row in links if row != [playlist_id, artist_id]]
        if len(remaining) == len(links):
            raise NotFoundError(
                f"Artist {artist_id} is not linked to playlist {playlist_id}"
            )
        self._write_rows(LINKS_FILE, remaining)
