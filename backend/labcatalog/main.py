from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import categories, lab_tests
from .config import Settings, get_settings
from .db import Database
from .logging import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Build the API.

    A `database` passed in stays owned by the caller. Otherwise one is created
    from `settings` at startup and disposed at shutdown.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if database is not None:
            logger.info("Server running on port %s", settings.port)
            yield
        else:
            owned = Database.from_settings(settings)
            app.state.database = owned
            logger.info(
                "Server running on port %s (pool_size=%s, query_timeout=%ss)",
                settings.port,
                settings.db_pool_size,
                settings.db_query_timeout,
            )
            try:
                yield
            finally:
                await owned.close()

    app = FastAPI(title="Lab Catalog API", lifespan=lifespan)
    if database is not None:
        app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(categories.router, prefix="/api", tags=["categories"])
    app.include_router(lab_tests.router, prefix="/api", tags=["lab_tests"])

    @app.get("/")
    async def root():
        return {"status": "ok", "message": "Lab Catalog API"}

    return app


app = create_app()
