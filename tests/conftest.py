"""Pytest configuration and fixtures."""

import os

# Set test database URL BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"

from contextlib import contextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import sessionmaker

from app.db import models  # noqa: F401  registers tables
from app.db.session import Base


@pytest.fixture
def sqlite_path(tmp_path):
    return tmp_path / "test.db"


@pytest.fixture(scope="function")
def sqlite_sessionmaker(sqlite_path):
    """Create a SQLite database with schema for testing."""
    db_path = sqlite_path
    engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    yield SessionLocal
    engine.dispose()


@pytest.fixture
def async_db_override(sqlite_sessionmaker, sqlite_path):
    """get_db replacement backed by the same SQLite file as sqlite_sessionmaker."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{sqlite_path}")
    factory = async_sessionmaker(engine, expire_on_commit=False)

    async def _get_db():
        async with factory() as session:
            yield session

    return _get_db


@pytest.fixture
def patched_sync_db(sqlite_sessionmaker):
    """Point worker activities at the SQLite test database."""

    @contextmanager
    def _get_sync_db():
        session = sqlite_sessionmaker()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    with patch("worker.activities.get_sync_db", _get_sync_db):
        yield sqlite_sessionmaker


@pytest.fixture
def mock_db_session():
    """Create a mock async database session."""
    mock_session = MagicMock()
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=None)
    mock_session.execute = AsyncMock()
    mock_session.add = MagicMock()
    mock_session.commit = AsyncMock()
    return mock_session


@pytest.fixture
def mock_temporal():
    """Create a mock Temporal client."""
    return AsyncMock()


@pytest.fixture
def mock_storage():
    """In-memory stand-in for MinioStorage."""
    objects: dict[tuple[str, str], bytes] = {}
    storage = MagicMock()

    def _put(bucket, key, data, *, content_type=None, metadata=None):
        objects[(bucket, key)] = data
        return f"{bucket}/{key}"

    storage.put_bytes = MagicMock(side_effect=_put)
    storage.get_bytes = MagicMock(side_effect=lambda bucket, key: (objects[(bucket, key)], {}))
    storage.objects = objects
    return storage
