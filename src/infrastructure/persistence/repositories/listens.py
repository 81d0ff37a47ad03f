"""Listen repository for listening history operations."""

from attrs import define
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import get_logger
from src.domain.entities import Listen
from src.infrastructure.persistence.database.db_models import DBListen
from src.infrastructure.persistence.repositories.repo_decorator import db_operation

logger = get_logger(__name__)


@define(frozen=True, slots=True)
class ListenMapper:
    """Maps between DBListen and Listen domain models."""

    @staticmethod
    def to_domain(db_model: DBListen) -> Listen:
        return Listen(song_id=db_model.song_id, played_at=db_model.played_at)

    @staticmethod
    def to_db(domain_model: Listen) -> DBListen:
        return DBListen(song_id=domain_model.song_id, played_at=domain_model.played_at)


class ListenRepository:
    """Repository for listening history. Listens are only ever appended."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.mapper = ListenMapper()

    @db_operation("append_listen")
    async def append(self, listen: Listen) -> None:
        self.session.add(self.mapper.to_db(listen))
        await self.session.flush()

    @db_operation("latest_listen")
    async def latest(self) -> Listen | None:
        """Listen with the greatest `played_at`, latest inserted on ties."""
        stmt = (
            select(DBListen)
            .order_by(DBListen.played_at.desc(), DBListen.id.desc())
            .limit(1)
        )
        db_listen = (await self.session.scalars(stmt)).first()
        return self.mapper.to_domain(db_listen) if db_listen is not None else None

    @db_operation("all_listens")
    async def all(self) -> list[Listen]:
        """Full history in insertion order."""
        result = await self.session.scalars(select(DBListen).order_by(DBListen.id))
        return [self.mapper.to_domain(db_listen) for db_listen in result]
