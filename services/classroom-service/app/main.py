"""FastAPI application wiring for the classroom service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from psycopg_pool import ConnectionPool

from .api.error_handlers import register_error_handlers
from .api.routes import router as api_router
from .config import get_settings
from .domain.service import ClassroomService
from .logging_config import setup_logging
from .repository import ClassroomRepository

settings = get_settings()
setup_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialise shared resources (Postgres pool, services) for the app lifecycle."""
    pool = ConnectionPool(
        settings.database_url,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        open=False,
    )
    pool.open()
    app.state.pool = pool
    app.state.classroom_service = ClassroomService(ClassroomRepository(pool))
    logger.info("connection pool opened (max_size=%d)", settings.db_pool_max_size)
    try:
        yield
    finally:
        pool.close()
        pool.wait_close()
        logger.info("connection pool closed")


app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=600,
)

register_error_handlers(app)


@app.get("/healthz", tags=["health"])
def healthz() -> dict[str, str]:
    """Return a minimal readiness indicator used by orchestration systems."""
    return {"status": "ok"}


app.include_router(api_router)
