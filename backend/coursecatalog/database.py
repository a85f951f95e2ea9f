"""
Course Catalog Backend — Database Session Management
=====================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   One process-wide engine owns the connection pool. Each request borrows
       a session through `get_db_session`, which always hands the connection
       back to the pool when the request ends.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import and disposed in the app lifespan;
       sessions are created per-request.

Connection Lifecycle:
    The engine is shared by every request; connections are pooled rather than
    opened and torn down per call. A session is released on every exit path
    of a handler: success, empty result, or error.

    All sessions are read-only. No commit is ever issued; closing the session
    rolls back the implicit transaction the SELECT opened.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from coursecatalog.config import settings


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(
    settings.database_url,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=settings.db_pool_pre_ping,
    pool_recycle=3600,                         # Recycle after 1 hour to prevent stale connections

    # Echo SQL queries in DEBUG mode for development visibility
    echo=settings.log_level == "DEBUG",
)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: loaded rows stay readable after the session closes
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    The mapped tables already exist; this metadata is never used to create
    or migrate them.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler (the handler performs queries)
        3. On error: rolls back so the connection goes back clean
        4. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/courses")
        async def list_courses(db: AsyncSession = Depends(get_db_session)):
            result = await db.execute(select(Course))
            return result.scalars().all()

    Raises:
        Any database exceptions are propagated to the global error handler,
        which returns appropriate HTTP status codes.
    """
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            # Runs for success, NotFoundError and failures alike
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
