"""Database initialization and dependency injection."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator, Optional

import fastapi
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.config import get_settings
from components.core.database import DatabaseManager
from components.core.logging import setup_logging
# Import all models to ensure they're registered
import components.user.models
import components.budget.models
import components.expense.models
import components.savings.models
import components.subscription.models

logger = logging.getLogger(__name__)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for getting database sessions."""
    db_manager: DatabaseManager = request.app.state.db_manager
    async with db_manager.get_db() as session:
        yield session


def init_db(app: fastapi.FastAPI, db_manager: Optional[DatabaseManager] = None) -> None:
    """Attach the database manager to the application."""
    app.state.db_manager = db_manager or DatabaseManager()


@asynccontextmanager
async def lifespan(app: fastapi.FastAPI) -> AsyncIterator[None]:
    """Open the store at startup and release it at shutdown."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    db_manager: DatabaseManager = app.state.db_manager

    if settings.DB_AUTO_CREATE:
        await db_manager.create_all()
    logger.info("Database ready (%s)", db_manager.engine.url.render_as_string(hide_password=True))

    yield

    await db_manager.dispose()
    logger.info("Database connections released")
