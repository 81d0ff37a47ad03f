"""Store factory selecting the persistence backend once at startup."""

from src.config import Settings, get_logger
from src.domain.repositories import StoreProtocol
from src.infrastructure.persistence.database.db_models import init_db
from src.infrastructure.persistence.file_store import FileStore
from src.infrastructure.persistence.store import DatabaseStore

logger = get_logger(__name__)


async def create_store(settings: Settings) -> StoreProtocol:
    """Build the store configured by `storage.backend`.

    The database backend gets its schema created on first use.
    """
    backend = settings.storage.backend
    logger.debug(f"Using {backend} store")

    if backend == "file":
        return FileStore(settings.storage.file_path)

    await init_db()
    return DatabaseStore()
