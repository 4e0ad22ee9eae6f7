from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from auth import router as auth_router
from auth.security import TokenService
from core import db
from core.config import Settings, load_settings, parse_listen_addr
from core.errors import register_error_handlers
from core.logging_config import setup_logging
from listings import router as listings_router
from storage import PostgresStorage, Storage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    owns_pool = app.state.store is None

    if owns_pool:
        # Initialize the DB pool and schema once per process; failure aborts startup.
        try:
            await db.init_pool(
                settings.database_url,
                min_size=settings.db_pool_min,
                max_size=settings.db_pool_max,
                command_timeout=settings.db_command_timeout,
            )
            await db.init_schema()
        except Exception:
            logger.exception("Database initialization failed")
            await db.close_pool()
            raise
        app.state.store = PostgresStorage()

    logger.info("API is ready")
    try:
        yield
    finally:
        if owns_pool:
            await db.close_pool()
            app.state.store = None
        logger.info("API stopped")


def create_app(settings: Settings | None = None, store: Storage | None = None) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings.log_level)
    if settings.uses_dev_secret:
        logger.warning("JWT_SECRET is not set; using the development signing secret.")

    app = FastAPI(title="Pet adoption listings", lifespan=lifespan)
    app.state.settings = settings
    app.state.tokens = TokenService.from_settings(settings)
    app.state.store = store

    register_error_handlers(app)
    app.include_router(auth_router.router, tags=["auth"])
    app.include_router(listings_router.router, tags=["listings"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


def run() -> None:
    settings = load_settings()
    host, port = parse_listen_addr(settings.listen_addr)
    app = create_app(settings)
    logger.info("API is running on %s:%s", host, port)
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    run()
