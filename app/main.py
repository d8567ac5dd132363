"""ASGI application for the street market API.

Run with ``feiras serve`` or ``uvicorn app.main:app``.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.engine import make_url

from app.core.config import Settings, get_settings
from app.core.database import get_engine
from app.core.exceptions import register_exception_handlers
from app.core.health import router as health_router
from app.core.logging import configure_logging, get_logger
from app.core.middleware import RequestIdMiddleware
from app.features.markets.routes import router as markets_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging on startup and release pooled connections on shutdown."""
    settings: Settings = app.state.settings
    configure_logging()

    logger.info(
        "app.startup_completed",
        app_name=settings.app_name,
        app_env=settings.app_env,
        database=make_url(settings.database_url).render_as_string(hide_password=True),
    )

    yield

    await get_engine().dispose()
    logger.info("app.shutdown_completed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings to build from; the cached settings when omitted.

    Returns:
        Application with middleware, error handlers and routers installed.
    """
    settings = settings or get_settings()
    docs_enabled = settings.is_development

    app = FastAPI(
        title=settings.app_name,
        description="Registry of São Paulo street markets (feiras livres)",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )
    app.state.settings = settings

    app.add_middleware(RequestIdMiddleware)
    register_exception_handlers(app)

    for router in (health_router, markets_router):
        app.include_router(router)

    return app


app = create_app()
