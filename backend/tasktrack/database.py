"""
TaskTrack Backend - Database Handle and Session Management
==========================================================

What:  The process-wide `Database` handle (async engine + session factory),
       the declarative `Base`, and the FastAPI session dependency.
How:   `create_app()` builds one `Database` and stores it on `app.state.db`.
       `get_db_session` borrows that handle for each request and yields a
       fresh `AsyncSession`; nothing here is rebuilt per request.
Who:   Route dependencies, Alembic (`Base.metadata`) and the test suite.

Connection Pooling (PostgreSQL):
    pool_size / max_overflow come from settings, pool_pre_ping validates
    connections before use, pool_recycle=3600 drops hour-old connections.
    SQLite URLs skip the pool arguments (SQLAlchemy picks its own pool).
"""

import logging
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from tasktrack.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every model registers with this metadata, which Alembic reads for
    autogeneration and `Database.create_all()` uses for throwaway schemas.
    """
    pass


def _engine_options(config: Settings) -> Dict[str, Any]:
    options: Dict[str, Any] = {
        "pool_pre_ping": config.db_pool_pre_ping,
        "echo": config.log_level == "DEBUG",
    }
    if not config.is_sqlite:
        options.update(
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_recycle=3600,
        )
    return options


class Database:
    """
    Owns the async engine and the session factory for one process.

    expire_on_commit=False keeps attribute access working on objects after
    the gateway commits, so route handlers can serialize them.
    """

    def __init__(self, url: Optional[str] = None, config: Optional[Settings] = None):
        self.config = config or default_settings
        self.url = url or self.config.database_url
        self.engine: AsyncEngine = create_async_engine(self.url, **_engine_options(self.config))
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_all(self) -> None:
        """Create every table registered on Base.metadata (idempotent)."""
        # Models must be imported so their tables are on the metadata
        from tasktrack.models import task, user  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured")

    async def ping(self) -> bool:
        """Run SELECT 1; returns False instead of raising when unreachable."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def dispose(self) -> None:
        """Close all pooled connections (application shutdown)."""
        await self.engine.dispose()


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    The session comes from the Database stored on the application. On an
    exception the open transaction is rolled back and the error re-raised
    for the global handlers; the session is always closed.
    """
    database: Database = request.app.state.db
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
