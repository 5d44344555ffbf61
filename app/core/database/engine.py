from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine, AsyncSession

from app.core.config import SQLALCHEMY_DATABASE_URL


def _pool_options(url: str) -> dict:
    # SQLite (used by the tests) manages its own connections
    if make_url(url).get_backend_name() == "sqlite":
        return {}
    # Some information about pool sizing: https://github.com/brettwooldridge/HikariCP/wiki/About-Pool-Sizing
    return dict(
        pool_size=16,
        max_overflow=0,
        pool_timeout=15,  # seconds
        pool_recycle=1800,
        pool_pre_ping=True,
    )


engine = create_async_engine(SQLALCHEMY_DATABASE_URL, echo=False, **_pool_options(SQLALCHEMY_DATABASE_URL))
# Attribute access after commit can't lazy load under asyncio, so keep rows populated
SessionLocal = async_sessionmaker(engine, autoflush=False, expire_on_commit=False, class_=AsyncSession)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with get_db_context() as db:
        yield db


@asynccontextmanager
async def get_db_context():
    db: AsyncSession = SessionLocal()
    try:
        yield db
    finally:
        await db.close()
