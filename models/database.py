from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from models.models import Base


DRIVER_PREFIX = "postgresql+asyncpg://"


def normalize_database_url(url: str) -> str:
    """Point plain postgres URLs at the asyncpg driver."""
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return DRIVER_PREFIX + url[len(prefix):]
    return url


def create_engine(url: str) -> AsyncEngine:
    return create_async_engine(normalize_database_url(url), echo=False, pool_pre_ping=True)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
