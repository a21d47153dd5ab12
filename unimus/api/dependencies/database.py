from functools import lru_cache
from typing import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from unimus.config import Settings, get_settings
from unimus.models.base import Base


@lru_cache()
def get_engine(database_url: str) -> AsyncEngine:
    """One engine (and connection pool) per database url for the process lifetime."""
    return create_async_engine(database_url, echo=False, pool_pre_ping=True)


def get_db_session_maker(settings: Settings) -> async_sessionmaker[AsyncSession]:
    engine = get_engine(settings.SQLALCHEMY_DATABASE_URL)
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def async_init(engine: AsyncEngine) -> None:
    """Create any missing tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db_session(
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[AsyncSession]:
    """Get the database session then close it after the request is complete."""
    AsyncSessionLocal = get_db_session_maker(settings)

    async with AsyncSessionLocal() as db_session:
        yield db_session
