import contextlib
from collections.abc import AsyncIterator, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.config.database import create_engine
from src.config.settings import settings
from src.main import app
from src.models import BaseModel
from src.models.registry import load_models

load_models()


@pytest.fixture
def client_factory() -> Callable[[dict], contextlib.AbstractAsyncContextManager[AsyncClient]]:
    """Build a test client with the given dependency overrides applied."""

    @contextlib.asynccontextmanager
    async def factory(overrides: dict | None = None) -> AsyncIterator[AsyncClient]:
        app.dependency_overrides.update(overrides or {})
        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client
        finally:
            app.dependency_overrides.clear()

    return factory


@pytest.fixture
async def client(client_factory) -> AsyncIterator[AsyncClient]:
    async with client_factory() as ac:
        yield ac


@pytest.fixture
async def db_session() -> AsyncIterator[AsyncSession]:
    """A session on a fresh in-memory database with all tables created."""
    engine = create_engine(settings.test_database_url)
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    session_maker = async_sessionmaker(engine, expire_on_commit=False)
    async with session_maker() as session:
        yield session
        await session.rollback()

    await engine.dispose()
