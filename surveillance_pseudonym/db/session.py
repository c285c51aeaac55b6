"""Async Session Factory — provides async DB sessions for direct usage outside FastAPI.

Invariants:
    - Meant for the purger command, migrations, and test fixtures
    - Caller owns the engine lifecycle (dispose when done)

Design Decisions:
    - Separate from infrastructure/database.py: the purger runs without the FastAPI lifespan
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)


def create_session_factory(
    database_url: str,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Create an async engine and session factory for the given database URL."""
    engine = create_async_engine(database_url, echo=False, pool_pre_ping=True)
    return engine, async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
