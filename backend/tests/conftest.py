"""
Atelier Catalog — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the whole suite.
How:   Service and route tests run against a throwaway SQLite file database
       (aiosqlite) created per test from Base.metadata; pure unit tests use a
       mocked AsyncSession.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session (no database)
    ├── db_engine:       async engine on tmp_path/catalog.db with all tables
    │   ├── session_factory: async_sessionmaker bound to db_engine
    │   │   ├── db_session:  one open session
    │   │   ├── references:  seeded categories / collections / signature pieces
    │   │   └── count_products: committed product rows, optionally by name
    │   └── test_client:     HTTPX AsyncClient with get_db_session overridden
"""

import os

# Must run before anything imports app.config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_atelier.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DEFAULT_ACTOR"] = "system"

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.database import Base
from app.models import facets, product, reference  # noqa: F401
from app.models.mixins import utcnow
from app.models.product import Product
from app.models.reference import Category, Collection, SignaturePiece


# ══════════════════════════════════════════════════════════════════════════
# Mocked Session
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    AsyncSession stand-in for failure-injection tests.

    execute() returns a result whose scalar_one_or_none() is None unless a
    test overrides it.
    """
    result = MagicMock()
    result.scalar_one_or_none.return_value = None
    result.rowcount = 1

    session = AsyncMock()
    session.execute = AsyncMock(return_value=result)
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# SQLite Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def references(session_factory):
    """One live row per reference store, plus a soft-deleted category."""
    async with session_factory() as session:
        category = Category(name="Rings")
        retired = Category(name="Retired", is_deleted=True, deleted_at=utcnow())
        collection = Collection(title="Bridal")
        piece = SignaturePiece(title="Solitaire")
        session.add_all([category, retired, collection, piece])
        await session.commit()

    return SimpleNamespace(
        category_id=category.id,
        deleted_category_id=retired.id,
        collection_id=collection.id,
        signature_piece_id=piece.id,
    )


@pytest.fixture
def count_products(session_factory):
    """Product row count in a fresh session, so it sees only committed data."""

    async def _count(name=None) -> int:
        async with session_factory() as session:
            query = select(func.count(Product.id))
            if name is not None:
                query = query.where(Product.name == name)
            result = await session.execute(query)
            return result.scalar_one()

    return _count


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX client talking to the FastAPI app in-process.

    get_db_session is overridden to hand out sessions on the per-test
    SQLite database.
    """
    from app.database import get_db_session
    from app.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
