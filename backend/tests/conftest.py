from __future__ import annotations

import asyncio
import sys
from collections.abc import AsyncIterator
from datetime import datetime
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

import eventpos.models  # noqa: E402,F401
from eventpos.core.config import get_settings  # noqa: E402
from eventpos.core.enums import TicketCategory  # noqa: E402
from eventpos.models.base import Base  # noqa: E402
from eventpos.services.ticket_numbers import SqlCounterStore  # noqa: E402


class MemoryCounterStore:
    """In-process counter store with switches for failure and interleaving scenarios."""

    def __init__(self) -> None:
        self.values: dict[TicketCategory, int] = {}
        self.updated_at: dict[TicketCategory, datetime] = {}
        self.fail_reads = False
        self.fail_writes = False
        # Yield to the event loop between reading and returning, so concurrent callers interleave.
        self.yield_on_read = False
        self.read_calls = 0
        self.write_calls = 0

    async def read(self, category: TicketCategory) -> int | None:
        self.read_calls += 1
        if self.fail_reads:
            raise ConnectionError("counter store unavailable")
        value = self.values.get(category)
        if self.yield_on_read:
            await asyncio.sleep(0)
        return value

    async def upsert(self, category: TicketCategory, current_number: int, updated_at: datetime) -> None:
        self.write_calls += 1
        if self.fail_writes:
            raise ConnectionError("counter store unavailable")
        self.values[category] = current_number
        self.updated_at[category] = updated_at

    async def reset(self, category: TicketCategory, updated_at: datetime) -> None:
        if self.fail_writes:
            raise ConnectionError("counter store unavailable")
        if category in self.values:
            self.values[category] = 0
            self.updated_at[category] = updated_at


@pytest_asyncio.fixture
async def db_engine(tmp_path, monkeypatch) -> AsyncIterator[AsyncEngine]:
    db_path = tmp_path / "test.db"

    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    monkeypatch.setenv("DRINK_PRODUCT_ID_MIN", "1")
    monkeypatch.setenv("DRINK_PRODUCT_ID_MAX", "20")
    get_settings.cache_clear()

    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", future=True)

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, _connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=db_engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def counter_store(session_factory: async_sessionmaker[AsyncSession]) -> SqlCounterStore:
    return SqlCounterStore(session_factory)


@pytest.fixture
def memory_store() -> MemoryCounterStore:
    return MemoryCounterStore()
