"""Service test fixtures — async SQLite blog database, adapter and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database with the same seeded blog
    - db_manager patched so the fetcher and readiness probe share the test engine
    - Registry built from the blog models exactly as build_adapter does in production

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for eager-loading tests
      (ADR: PostgreSQL-specific features not exercised here)
    - Fake DatabaseSessionManager via __new__: reuses its session()/health_check()
      without creating a second engine
"""

from datetime import datetime

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from shelf.config import Settings
from shelf.db.base import Base
from shelf.infrastructure.database import DatabaseSessionManager
from shelf.infrastructure.sqlalchemy_fetcher import SqlAlchemyFetcher
from shelf.infrastructure.sqlalchemy_registry import build_registry
from shelf.main import create_app
from shelf.services.json_api_adapter import JsonApiAdapter
import shelf.infrastructure.database as db_module
from tests.services.blog_models import (
    BLOG_MODELS, Author, Comment, Post, Profile, Publisher, Tag,
)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
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
async def blog_data(test_session_factory):
    """Publisher 1; authors 5 (Ada), 6 (Grace), 7 (Linus, no posts);
    posts 1-2 by Ada, 3 without author, 4 by Grace; comments 10-11 on
    post 1, 12 on post 2; tags 1-2 on post 1, tag 1 on post 2."""
    async with test_session_factory() as session:
        python = Tag(id=1, label="python")
        sql = Tag(id=2, label="sql")
        session.add_all([
            Publisher(id=1, name="Penguin"),
            Author(id=5, name="Ada", publisher_id=1),
            Author(id=6, name="Grace"),
            Author(id=7, name="Linus"),
            Profile(id=1, bio="Analyst", author_id=5),
            Post(
                id=1, title="Hello", author_id=5,
                published_at=datetime(2024, 1, 2, 3, 4, 5),
                tags=[python, sql],
            ),
            Post(id=2, title="Second", author_id=5, tags=[python]),
            Post(id=3, title="Orphan", author_id=None),
            Post(id=4, title="Notes", author_id=6),
            Comment(id=10, body="First!", post_id=1),
            Comment(id=11, body="Agreed", post_id=1),
            Comment(id=12, body="Hmm", post_id=2),
        ])
        await session.commit()


@pytest.fixture
async def test_db_manager(test_engine, test_session_factory):
    """DatabaseSessionManager bound to the test engine, installed as db_manager."""
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager
    yield fake_manager
    db_module.db_manager = original_manager


@pytest.fixture
def blog_registry():
    return build_registry(BLOG_MODELS)


@pytest.fixture
async def adapter(test_db_manager, blog_registry, blog_data):
    fetcher = SqlAlchemyFetcher(
        test_db_manager.session, BLOG_MODELS, blog_registry,
    )
    return JsonApiAdapter(blog_registry, fetcher)


@pytest.fixture
async def client(adapter):
    """FastAPI test client over the seeded blog adapter."""
    settings = Settings(
        database_url="sqlite+aiosqlite:///:memory:", log_format="text",
    )
    app = create_app(adapter, settings)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
