"""Database engines and sessions.

The API uses the async engine; worker activities run in threads and use the
sync engine.
"""

from contextlib import contextmanager
from typing import AsyncIterator, Iterator

from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from app.core.config import settings


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""


def _to_async_url(url: str) -> str:
    if url.startswith("postgresql://"):
        return "postgresql+asyncpg://" + url[len("postgresql://"):]
    if url.startswith("sqlite://"):
        return "sqlite+aiosqlite://" + url[len("sqlite://"):]
    return url


def _to_sync_url(url: str) -> str:
    if url.startswith("sqlite+aiosqlite://"):
        return "sqlite://" + url[len("sqlite+aiosqlite://"):]
    if url.startswith("postgresql+asyncpg://"):
        return "postgresql://" + url[len("postgresql+asyncpg://"):]
    return url


def _connect_args(url: str) -> dict:
    # Activity threads share the sync SQLite pool.
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


# Async engine/session (FastAPI)
async_engine = create_async_engine(_to_async_url(settings.DATABASE_URL), pool_pre_ping=True)
AsyncSessionLocal = async_sessionmaker(async_engine, expire_on_commit=False)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Per-request async session."""
    async with AsyncSessionLocal() as session:
        yield session


async def init_db() -> None:
    """Create missing tables (dev convenience; Alembic owns real schemas)."""
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Sync engine/session (Temporal worker activities)
_sync_url = _to_sync_url(settings.DATABASE_URL)
sync_engine = create_engine(_sync_url, pool_pre_ping=True, connect_args=_connect_args(_sync_url))
SyncSessionLocal = sessionmaker(sync_engine, autocommit=False, autoflush=False)


@contextmanager
def get_sync_db() -> Iterator[Session]:
    """Transactional sync session: commit on success, rollback on error."""
    db = SyncSessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
