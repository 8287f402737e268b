"""Database Session Manager — async connection pool with automatic rollback and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Unique-constraint violations surface as ConflictError, every other
      SQLAlchemy failure as DatabaseError (core/errors.py)
    - The pool is bounded: pool_size connections, max_overflow extra, waiters
      queue until pool_timeout

Design Decisions:
    - One manager is constructed in the FastAPI lifespan and handed to
      UserRepository; no module-level singleton
    - expire_on_commit=False: rows stay readable after the session closes
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from users_api.core.errors import ConflictError, DatabaseError

logger = logging.getLogger(__name__)

_PG_UNIQUE_VIOLATION = "23505"
_MYSQL_DUP_ENTRY = 1062
_DUPLICATE_MARKERS = ("duplicate key", "duplicate entry", "unique constraint failed")


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the driver reports a duplicate value for a unique column."""
    orig = exc.orig
    if getattr(orig, "sqlstate", None) == _PG_UNIQUE_VIOLATION:
        return True
    if getattr(orig, "pgcode", None) == _PG_UNIQUE_VIOLATION:
        return True
    args = getattr(orig, "args", ())
    if args and args[0] == _MYSQL_DUP_ENTRY:
        return True
    message = str(orig).lower()
    return any(marker in message for marker in _DUPLICATE_MARKERS)


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        max_overflow: int = 0,
        pool_timeout: int = 30,
    ):
        engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=pool_timeout,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        self._bind(engine)

    @classmethod
    def from_engine(cls, engine: AsyncEngine) -> "DatabaseSessionManager":
        """Wrap an existing engine (SQLite in tests, custom pools in scripts)."""
        manager = cls.__new__(cls)
        manager._bind(engine)
        return manager

    def _bind(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self._session_factory = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback and error mapping."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            if is_unique_violation(e):
                logger.warning(f"DB unique violation: {e.orig}")
                raise ConflictError(detail=str(e.orig)) from e
            logger.error(f"DB integrity error: {e}")
            raise DatabaseError("commit", str(e.orig)) from e
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise DatabaseError("execute", str(e.orig)) from e
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise DatabaseError("query", str(e.orig)) from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("operation", str(e)) from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()
