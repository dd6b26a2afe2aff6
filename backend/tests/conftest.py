"""Shared test fixtures for news store tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable, Iterable
from typing import Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from newsreader.core.database import enable_sqlite_foreign_keys
from newsreader.domains.news_store import NewsStoreFacade
from newsreader.models import (
    Base,
    NewsSet,
    PredefinedNewsDefinition,
    UserDefinedNewsDefinition,
)


SQLITE_TEST_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Provide an async engine backed by a fresh in-memory SQLite database."""
    engine = create_async_engine(
        SQLITE_TEST_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def async_session_factory(
    async_engine: AsyncEngine,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Provide an async session factory bound to the test engine."""
    factory = async_sessionmaker(
        async_engine,
        expire_on_commit=False,
        class_=AsyncSession,
    )
    yield factory


@pytest_asyncio.fixture
async def async_session(
    async_session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Yield an AsyncSession and ensure rollback between tests."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest_asyncio.fixture
async def news_store(async_session: AsyncSession) -> AsyncGenerator[NewsStoreFacade, None]:
    """Shortcut fixture to interact with the news store facade."""
    yield NewsStoreFacade(async_session)


@pytest.fixture
def make_predefined(
    news_store: NewsStoreFacade,
) -> Callable[..., Awaitable[PredefinedNewsDefinition]]:
    async def _make(name: str, roles: Optional[Iterable[str]] = None, **kwargs) -> PredefinedNewsDefinition:
        definition = PredefinedNewsDefinition(
            name=name,
            default_roles=set(roles or ()),
            parameters=kwargs.pop("parameters", {"url": f"https://feeds.example.com/{name.lower()}.xml"}),
            **kwargs,
        )
        return await news_store.store_definition(definition)

    return _make


@pytest.fixture
def make_user_defined(
    news_store: NewsStoreFacade,
) -> Callable[..., Awaitable[UserDefinedNewsDefinition]]:
    async def _make(name: str, **kwargs) -> UserDefinedNewsDefinition:
        definition = UserDefinedNewsDefinition(
            name=name,
            parameters=kwargs.pop("parameters", {"url": f"https://blog.example.org/{name.lower()}.xml"}),
            **kwargs,
        )
        return await news_store.store_definition(definition)

    return _make


@pytest.fixture
def make_set(news_store: NewsStoreFacade) -> Callable[..., Awaitable[NewsSet]]:
    async def _make(user_id: str = "student1", name: str = "default") -> NewsSet:
        return await news_store.store_set(NewsSet(user_id=user_id, name=name))

    return _make
