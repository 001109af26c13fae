from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware

from loan_office import __version__
from loan_office.api.v1 import api_router
from loan_office.core.errors import register_exception_handlers
from loan_office.core.limiter import limiter
from loan_office.core.logging import configure_logging
from loan_office.core.settings import settings
from loan_office.db.session import Database
from loan_office.events import register_event_handlers
from loan_office.middlewares.request_context import RequestContextMiddleware
from loan_office.middlewares.security_headers import SecurityHeadersMiddleware


def create_app(database: Database | None = None) -> FastAPI:
    configure_logging()
    app = FastAPI(title="Loan Office Backend", version=__version__)
    app.state.database = database
    register_exception_handlers(app)
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, enable_hsts=settings.enable_hsts)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Data-Source", "X-Fallback-Reason", "X-Request-ID"],
    )
    app.include_router(api_router, prefix="/api/v1")
    register_event_handlers(app)
    return app


app = create_app()
