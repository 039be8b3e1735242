"""Database Session Manager — async connection pool with automatic rollback and probes.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Unique constraint violations mapped to StorageConflictError
    - Every other SQLAlchemy/driver failure mapped to StorageUnavailableError
    - probe() creates missing tables on request; callers bound it with a timeout

Design Decisions:
    - expire_on_commit=False: prevents lazy-load issues in async context
    - SQLite URLs (tests, local demo) use StaticPool; pool sizing only applies
      to server databases
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool

from eventix.core.errors import StorageConflictError, StorageUnavailableError
from eventix.db.base import Base
import eventix.models  # noqa: F401  (populates Base.metadata)

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and probes."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if database_url.startswith("sqlite"):
            engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.warning(f"DB integrity error: {e}")
            raise StorageConflictError("Integrity constraint violated")
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise StorageUnavailableError(
                "Connection or operational error", "execute",
            )
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise StorageUnavailableError("Database driver error", "query")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise StorageUnavailableError("Database operation failed", "unknown")
        except OSError as e:
            # Driver-level connect failures surface as OSError before SQLAlchemy wraps them
            logger.error(f"DB connection error: {e}")
            raise StorageUnavailableError("Database unreachable", "connect")
        finally:
            await session.close()

    async def probe(self, create_schema: bool = False) -> None:
        """Check connectivity (and bootstrap tables). Raises StorageUnavailableError."""
        try:
            if create_schema:
                async with self.engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            raise StorageUnavailableError(str(e), "probe")
        async with self.session() as db:
            await db.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        await self.engine.dispose()
