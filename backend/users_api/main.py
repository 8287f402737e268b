"""Users API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map every failure to the {success: false, ...} envelope
    - CORS configured from settings (not hardcoded)
    - The connection pool is built in the lifespan and injected into UserRepository

Design Decisions:
    - create_app() factory: tests build isolated apps and set app.state themselves
    - A repository already present on app.state is left alone by the lifespan
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from users_api.api.error_handlers import register_error_handlers
from users_api.api.request_logging import log_requests
from users_api.api.routes import health, index, users
from users_api.config import get_settings
from users_api.infrastructure.database import DatabaseSessionManager
from users_api.infrastructure.observability import setup_logging
from users_api.infrastructure.user_repository import UserRepository

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    db_manager = None
    if getattr(app.state, "user_repository", None) is None:
        db_manager = DatabaseSessionManager(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_timeout=settings.database_pool_timeout,
        )
        app.state.db_manager = db_manager
        app.state.user_repository = UserRepository(db_manager)

    logger.info(f"Users API started ({settings.app_env})")
    yield
    logger.info("Users API shutting down")
    if db_manager is not None:
        await db_manager.dispose()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Users API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(log_requests)

    app.include_router(health.router)
    app.include_router(index.router)
    app.include_router(users.router)

    register_error_handlers(app)
    return app


app = create_app()
