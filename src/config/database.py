import contextlib
import sys
from collections.abc import AsyncIterator

from alembic import command, config
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.config.settings import settings


def create_engine(url: str):
    url = str(url)
    use_echo = settings.LOG_DB
    connect_args = {}
    kwargs = {}
    if "sqlite" in url:
        connect_args = {"timeout": 15}
        if url.rstrip("/").endswith("sqlite+aiosqlite:"):
            # in-memory databases only live as long as their single connection
            kwargs["poolclass"] = StaticPool
    return create_async_engine(
        url,
        echo=use_echo,
        connect_args=connect_args,
        **kwargs,
    )


if "pytest" in sys.modules:
    # tests never touch the production database
    engine = create_engine(settings.test_database_url)
else:
    engine = create_engine(settings.database_url)


def run_upgrade(connection, cfg):
    cfg.attributes["connection"] = connection
    command.upgrade(cfg, "head")


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(run_upgrade, config.Config("alembic.ini"))


async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


async def get_async_session() -> AsyncIterator[AsyncSession]:
    async with async_session_maker() as session:
        yield session


@contextlib.asynccontextmanager
async def async_session_manager(
    auto_commit=True, session_overwrite: AsyncSession | None = None
) -> AsyncIterator[AsyncSession]:
    if session_overwrite:
        yield session_overwrite
    else:
        async with async_session_maker() as session:
            try:
                yield session
            except Exception as e:
                await session.rollback()
                raise e
            else:
                if auto_commit:
                    await session.commit()
