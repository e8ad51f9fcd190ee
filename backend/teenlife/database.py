"""
TeenLife Hours Backend — Database Session Management
======================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   Creates an async engine with connection pooling, provides a session
       dependency that auto-commits on success and auto-rolls-back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Transaction boundary:
    One request = one session = one transaction. Services only flush; the
    dependency below commits. Notification inserts run in savepoints nested
    inside that transaction (see services/notification_service.py).
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from teenlife.config import settings


def _engine_options(url: str) -> Dict[str, Any]:
    """Pool options for the configured backend; SQLite (tests, local runs) gets none."""
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if url.startswith("sqlite"):
        return options
    options.update(
        pool_size=settings.db_pool_size,          # Persistent connections (default: 20)
        max_overflow=settings.db_max_overflow,     # Extra connections for spikes (default: 10)
        pool_pre_ping=settings.db_pool_pre_ping,  # Validate before use (default: True)
        pool_recycle=3600,
    )
    return options


def enable_sqlite_savepoints(target: AsyncEngine, immediate: bool = False) -> None:
    """
    Let the SQLite driver honour SAVEPOINT.

    The driver normally defers BEGIN until the first write, which breaks the
    nested transactions the notification emitter relies on. Autocommit mode on
    the driver plus an explicit BEGIN from SQLAlchemy restores them.

    immediate=True takes the write lock at BEGIN, so concurrent writers on
    separate connections wait on the busy timeout instead of failing with
    "database is locked" when a read lock is upgraded.
    """
    begin_sql = "BEGIN IMMEDIATE" if immediate else "BEGIN"

    @event.listens_for(target.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(target.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql(begin_sql)


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options(settings.database_url))
if settings.database_url.startswith("sqlite"):
    enable_sqlite_savepoints(engine)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: ORM objects stay readable after the request commits,
# so routes can serialize them after the service returns.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object used by Alembic and by the test suite's
    `create_all`.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back the transaction and re-raises
        5. Always: closes the session (returns connection to pool)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise  # Re-raise so the global error handler can respond appropriately
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """Close all pooled connections. Called from the lifespan shutdown."""
    await engine.dispose()
