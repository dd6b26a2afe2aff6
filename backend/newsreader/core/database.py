"""
Database configuration and session management
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from loguru import logger

from newsreader.core.config import settings
from newsreader.core.exceptions import NewsStoreError, translate_database_error


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores FOREIGN KEY clauses unless the pragma is set per connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ARG001
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.DEBUG, "pool_pre_ping": True}
    if not settings.is_sqlite:
        options.update(
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
        )
    return options


# Create async engine
engine = create_async_engine(settings.DATABASE_URL, **_engine_options())
if settings.is_sqlite:
    enable_sqlite_foreign_keys(engine)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def has_pending_changes(session: AsyncSession) -> bool:
    """Whether the session holds objects that a flush would write."""
    return bool(session.new or session.dirty or session.deleted)


async def _rollback_and_translate(
    session: AsyncSession,
    exc: BaseException,
    *,
    entity: str,
    operation: str,
) -> BaseException:
    await session.rollback()
    if isinstance(exc, NewsStoreError):
        logger.warning(f"Rolled back {operation} for {entity}")
        return exc
    if isinstance(exc, SQLAlchemyError):
        logger.exception(f"Database error during {operation} for {entity}")
        return translate_database_error(exc, entity=entity, operation=operation)
    return exc


@asynccontextmanager
async def transaction_scope(
    session: AsyncSession,
    *,
    entity: str,
    operation: str,
) -> AsyncIterator[AsyncSession]:
    """
    Run one writing unit of work against ``session``.

    The transaction is committed when the block exits normally and rolled back
    on any error. Database errors are re-raised as typed ``NewsStoreError``
    subclasses; nothing is retried here.
    """
    try:
        yield session
        await session.commit()
    except BaseException as exc:
        error = await _rollback_and_translate(session, exc, entity=entity, operation=operation)
        if error is exc:
            raise
        raise error from exc


@asynccontextmanager
async def read_scope(
    session: AsyncSession,
    *,
    entity: str,
    operation: str,
) -> AsyncIterator[AsyncSession]:
    """
    Run one read-only unit of work against ``session``.

    Queries run without autoflush, so in-memory changes the caller has not
    stored yet are neither written nor committed. The read transaction is
    closed only when the session has nothing pending; otherwise it is left to
    the caller's next store.
    """
    try:
        with session.no_autoflush:
            yield session
        if not has_pending_changes(session):
            await session.commit()
    except BaseException as exc:
        error = await _rollback_and_translate(session, exc, entity=entity, operation=operation)
        if error is exc:
            raise
        raise error from exc


async def close_db():
    """
    Close database connections
    """
    await engine.dispose()
    logger.info("Database connections closed")
