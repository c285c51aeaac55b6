"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - All sessions share one connection (StaticPool), so data committed by one session
      is visible to the others
    - get_db dependency overridden to use the test DB; get_today pinned to 2025-08-05

Design Decisions:
    - SQLite in-memory: fast, no external dependency. FOR UPDATE is not rendered on SQLite,
      so locking itself is not exercised here, only the locked code path
    - Races are simulated by serving a stale first link read (see stale_first_read),
      which makes the real primary key constraint fire
"""

import uuid
from datetime import date

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from surveillance_pseudonym.api.routes.pseudonym import get_today
from surveillance_pseudonym.core.domain_types import MonthDay
from surveillance_pseudonym.db.base import Base
from surveillance_pseudonym.infrastructure.database import get_db, DatabaseSessionManager
from surveillance_pseudonym.models.chain import Chain
from surveillance_pseudonym.models.period import Period
from surveillance_pseudonym.models.pseudonym_link import PseudonymLink
from surveillance_pseudonym.services.resolve_chain import ChainResolver
from surveillance_pseudonym.services.resolve_period import PeriodResolver
import surveillance_pseudonym.infrastructure.database as db_module
from surveillance_pseudonym.main import app

TODAY = date(2025, 8, 5)
JULY_FIRST = MonthDay(7, 1)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def chain_resolver(test_db):
    return ChainResolver(test_db)


@pytest.fixture
def make_period_resolver(test_db):
    """Period resolver factory with the clock pinned to TODAY and a --07-01 cutoff."""
    def _make(max_lifetime_in_years: int = 3, today: date = TODAY) -> PeriodResolver:
        return PeriodResolver(
            test_db,
            max_lifetime_in_years=max_lifetime_in_years,
            adjust_reference_day=JULY_FIRST,
            today=lambda: today,
        )
    return _make


@pytest.fixture
async def seed_chain(test_session_factory):
    """Insert a chain (and optionally links) through a separate session."""
    async def _seed(*tokens: bytes, created_at=None) -> uuid.UUID:
        chain_id = uuid.uuid4()
        async with test_session_factory() as db:
            chain = Chain(chain_id=chain_id)
            if created_at is not None:
                chain.created_at = created_at
            db.add(chain)
            await db.flush()
            db.add_all([
                PseudonymLink(token_hash=token, chain_id=chain_id) for token in tokens
            ])
            await db.commit()
        return chain_id
    return _seed


@pytest.fixture
def stale_first_read(monkeypatch):
    """Make the resolver's first link read miss the given tokens, as if read before a
    concurrent caller committed them."""
    def _apply(resolver: ChainResolver, *hidden: bytes) -> None:
        original = resolver._find_links
        calls = {"count": 0}

        async def _find_links(tokens):
            calls["count"] += 1
            if calls["count"] == 1:
                # hidden rows are never loaded, so they stay out of the identity map
                tokens = [token for token in tokens if token not in hidden]
            return await original(tokens)

        monkeypatch.setattr(resolver, "_find_links", _find_links)
    return _apply


@pytest.fixture
def read_all(test_session_factory):
    """Fresh-session readers for asserting committed state."""
    class _Reader:
        async def chains(self) -> list[Chain]:
            async with test_session_factory() as db:
                return list((await db.execute(select(Chain))).scalars().all())

        async def links(self) -> list[PseudonymLink]:
            async with test_session_factory() as db:
                return list((await db.execute(select(PseudonymLink))).scalars().all())

        async def periods(self, chain_id=None) -> list[Period]:
            query = select(Period).order_by(Period.max_year.desc())
            if chain_id is not None:
                query = query.where(Period.chain_id == chain_id)
            async with test_session_factory() as db:
                return list((await db.execute(query)).scalars().all())
    return _Reader()


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden and the clock pinned."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: (lambda: TODAY)

    # Patch db_manager for the readiness probe
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
