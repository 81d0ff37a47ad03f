"""SQLAlchemy database models for the Needledrop store.

This module defines the persisted records of the curation engine using
SQLAlchemy 2.0 patterns with proper type annotations and relationship
definitions: listening history, automated playlists and the artist links
feeding them.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, MetaData, String, UniqueConstraint
from sqlalchemy.ext.asyncio import AsyncAttrs, AsyncEngine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from src.config import get_logger

# Create module logger
logger = get_logger(__name__)

# Define naming convention for constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",  # Index
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",  # Unique constraint
    "ck": "ck_%(table_name)s_%(constraint_name)s",  # Check constraint
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",  # Foreign key
    "pk": "pk_%(table_name)s",  # Primary key
}

# Create metadata with naming convention
metadata = MetaData(naming_convention=convention)


class NeedledropDBBase(AsyncAttrs, DeclarativeBase):
    """Base class for all database models with surrogate key and creation time."""

    metadata = metadata

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )


class DBListen(NeedledropDBBase):
    """Immutable record of one play. Insertion order is history order."""

    __tablename__ = "listens"

    song_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    played_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )


class DBAutomatedPlaylist(NeedledropDBBase):
    """Remote playlist the engine keeps populated."""

    __tablename__ = "automated_playlists"

    playlist_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    # Relationships
    links: Mapped[list["DBArtistLink"]] = relationship(
        back_populates="playlist",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="DBArtistLink.id",
    )


class DBArtistLink(NeedledropDBBase):
    """Artist feeding an automated playlist. Each pair exists at most once."""

    __tablename__ = "artist_links"
    __table_args__ = (UniqueConstraint("playlist_id", "artist_id"),)

    playlist_id: Mapped[str] = mapped_column(
        ForeignKey("automated_playlists.playlist_id", ondelete="CASCADE"),
        nullable=False,
    )
    artist_id: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    playlist: Mapped[DBAutomatedPlaylist] = relationship(
        back_populates="links",
        passive_deletes=True,
    )


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Initialize database schema.

    Creates all tables if they don't exist.
    This is a safe operation that won't affect existing data.
    """
    from sqlalchemy import inspect

    from src.infrastructure.persistence.database.db_connection import get_engine

    engine = engine or get_engine()

    try:
        async with engine.connect() as conn:
            existing_tables = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).get_table_names()
            )
            if existing_tables:
                logger.debug(f"Found existing tables: {existing_tables}")

        # Create tables - SQLAlchemy will skip tables that already exist
        async with engine.begin() as conn:
            await conn.run_sync(NeedledropDBBase.metadata.create_all)

    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise
    else:
        logger.debug("Database schema initialization complete")
