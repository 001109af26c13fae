import logging

from loan_office import models  # noqa: F401 - registers tables on the metadata
from loan_office.db.base import Base
from loan_office.db.session import Database

logger = logging.getLogger(__name__)


async def init_db(database: Database) -> None:
    """Create any missing tables. Migrations remain the source of truth in production."""
    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured")
