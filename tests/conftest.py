from datetime import UTC, datetime, timedelta

import pytest

from src.domain.entities import Listen
from src.infrastructure.persistence.database.db_connection import (
    create_db_engine,
    create_session_factory,
)
from src.infrastructure.persistence.database.db_models import init_db
from tests.fixtures.fakes import FakeMusicService, InMemoryStore, ScriptedChooser

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def now():
    """Fixed UTC instant used as the current time."""
    return NOW


@pytest.fixture
def clock(now):
    return lambda: now


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def music(now):
    return FakeMusicService(now=now)


@pytest.fixture
def chooser():
    return ScriptedChooser()


@pytest.fixture
def listen_at(now):
    """Build a listen relative to `now`."""

    def _listen(song_id: str, **offset) -> Listen:
        return Listen(song_id=song_id, played_at=now - timedelta(**offset))

    return _listen


@pytest.fixture
async def db_engine():
    """In-memory SQLite engine with the schema created."""
    engine = create_db_engine("sqlite+aiosqlite:///:memory:")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return create_session_factory(db_engine)
