import logging

from fastapi import FastAPI

from loan_office.core.settings import settings
from loan_office.db.init_db import init_db
from loan_office.db.session import Database

logger = logging.getLogger(__name__)


def register_event_handlers(app: FastAPI) -> None:
    @app.on_event("startup")
    async def on_startup() -> None:
        logger.info("Application startup")
        if getattr(app.state, "database", None) is None:
            app.state.database = Database.from_settings(settings)
        if settings.auto_create_schema:
            await init_db(app.state.database)

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        logger.info("Application shutdown")
        database = getattr(app.state, "database", None)
        if database is not None:
            await database.dispose()
            app.state.database = None
