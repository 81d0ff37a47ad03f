"""Repository layer for database operations with SQLAlchemy 2.0."""

from src.infrastructure.persistence.repositories.listens import (
    ListenMapper,
    ListenRepository,
)
from src.infrastructure.persistence.repositories.playlists import (
    PlaylistMapper,
    PlaylistRepository,
)
from src.infrastructure.persistence.repositories.repo_decorator import db_operation

__all__ = [
    "ListenMapper",
    "ListenRepository",
    "PlaylistMapper",
    "PlaylistRepository",
    "db_operation",
]
