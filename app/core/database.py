# app/core/database.py

"""
Database connection and session management.

- Builds the SQLAlchemy async engine from settings.DATABASE_URL.
- Provides the per-request AsyncSession dependency (get_session).
- Creates the tables on startup (Alembic is not used by this service).
"""

from typing import Any, AsyncGenerator, Dict
from contextlib import asynccontextmanager
import logging

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings

# Every table model must be imported so that SQLModel.metadata knows about it.
from app.domains.usr import models as usr_models  # noqa: F401
from app.domains.inv import models as inv_models  # noqa: F401

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> Dict[str, Any]:
    """Pool options differ between PostgreSQL and SQLite."""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_recycle": 3600,   # recycle connections every hour
        "pool_size": 10,
        "max_overflow": 20,
        "pool_pre_ping": True,
    }


DATABASE_URL = settings.DATABASE_URL.get_secret_value()

engine: AsyncEngine = create_async_engine(
    DATABASE_URL,
    echo=settings.DEBUG_MODE,
    future=True,
    **_engine_options(DATABASE_URL),
)

AsyncSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

metadata = SQLModel.metadata


async def create_db_and_tables() -> None:
    """
    Creates missing tables. Existing tables are left untouched.
    """
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables verified (%d tables).", len(SQLModel.metadata.tables))


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency: one session per request, closed when the request ends.
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def get_async_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Standalone session for scripts; commits on success and rolls back on error.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
