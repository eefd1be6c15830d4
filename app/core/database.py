"""Async database engine and session management."""

from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings

engine = create_async_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=settings.DEBUG,
)

SessionLocal = async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields a DB session and closes it when done."""
    async with SessionLocal() as db:
        yield db


async def check_db_connected(db: AsyncSession) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        await db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
