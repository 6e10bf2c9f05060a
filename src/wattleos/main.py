"""
WattleOS Pedagogy FastAPI Application

Curriculum trees, student mastery tracking and class heatmaps.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import text

from wattleos.api import health
from wattleos.api.v1 import curriculum, mastery
from wattleos.config import settings
from wattleos.core.database import close_db, engine

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Verify the database on startup; dispose of the pool on shutdown."""
    logger.info(f"{health.SERVICE_NAME} starting ({settings.ENVIRONMENT})")

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        raise
    logger.info("Database connection verified")

    yield

    logger.info(f"{health.SERVICE_NAME} shutting down")
    await close_db()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=health.SERVICE_NAME,
        description="Curriculum, mastery tracking and class heatmaps",
        version=health.SERVICE_VERSION,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.include_router(health.router)
    app.include_router(curriculum.router, prefix="/api/v1/curriculum", tags=["Curriculum"])
    app.include_router(mastery.router, prefix="/api/v1/mastery", tags=["Mastery"])

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "wattleos.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.is_local and settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
