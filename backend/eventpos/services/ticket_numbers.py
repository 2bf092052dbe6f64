from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from eventpos.core.enums import TicketCategory
from eventpos.models.ticket_counter import TicketCounter
from eventpos.schemas.ticket_counters import TicketCounterOut


logger = logging.getLogger(__name__)

DEFAULT_DRINK_PRODUCT_RANGE: tuple[int, int] = (1, 20)


@dataclass(frozen=True)
class CategoryFormat:
    prefix: str
    digits: int
    max_number: int

    def format(self, number: int) -> str:
        return f"{self.prefix}-{number:0{self.digits}d}"


CATEGORY_FORMATS: dict[TicketCategory, CategoryFormat] = {
    TicketCategory.TICKET: CategoryFormat(prefix="TI", digits=3, max_number=999),
    TicketCategory.DRINK: CategoryFormat(prefix="DR", digits=4, max_number=9999),
}


class CounterStore(Protocol):
    async def read(self, category: TicketCategory) -> int | None:
        """Last issued number for `category`, or None if no counter row exists yet."""
        ...

    async def upsert(self, category: TicketCategory, current_number: int, updated_at: datetime) -> None:
        ...

    async def reset(self, category: TicketCategory, updated_at: datetime) -> None:
        ...


def resolve_category(category: TicketCategory | str) -> tuple[TicketCategory, CategoryFormat]:
    try:
        resolved = TicketCategory(category)
    except ValueError as e:
        raise ValueError(f"Invalid ticket category: {category!r}") from e
    return resolved, CATEGORY_FORMATS[resolved]


def format_ticket_number(category: TicketCategory | str, number: int) -> str:
    _, fmt = resolve_category(category)
    if not 0 <= number <= fmt.max_number:
        raise ValueError(f"Ticket number out of range for {category}: {number}")
    return fmt.format(number)


def get_ticket_type(
    product_ids: Iterable[int | None],
    *,
    drink_range: tuple[int, int] = DEFAULT_DRINK_PRODUCT_RANGE,
) -> TicketCategory:
    """
    Classify a purchase by its product ids.

    An order is a drink order only if every product id falls inside the closed
    `drink_range`. An empty list is a drink order (vacuous truth), and a line
    without a product id never counts as a drink.
    """
    low, high = drink_range
    all_drinks = all(pid is not None and low <= pid <= high for pid in product_ids)
    return TicketCategory.DRINK if all_drinks else TicketCategory.TICKET


def _fallback_number(max_number: int) -> int:
    return (time.time_ns() // 1_000_000) % max_number


async def generate_ticket_number(store: CounterStore, category: TicketCategory | str) -> str:
    """
    Issue the next display code for `category` (TI-001..TI-999, DR-0001..DR-9999).

    Read-increment-write without locking: concurrent callers for the same
    category can receive the same code. Store failures never propagate. A failed
    read yields a time-derived fallback code, a failed write still returns the
    computed code and leaves the counter stale.
    """
    category, fmt = resolve_category(category)

    try:
        current = await store.read(category)
    except Exception:
        logger.warning("Ticket counter read failed for %s; issuing fallback number", category, exc_info=True)
        return fmt.format(_fallback_number(fmt.max_number))

    next_number = ((current or 0) % fmt.max_number) + 1

    try:
        await store.upsert(category, next_number, datetime.now(timezone.utc))
    except Exception:
        logger.warning(
            "Ticket counter update failed for %s; counter left at %s",
            category,
            current,
            exc_info=True,
        )

    return fmt.format(next_number)


async def reset_ticket_counter(store: CounterStore, category: TicketCategory | str) -> bool:
    category, _ = resolve_category(category)
    try:
        await store.reset(category, datetime.now(timezone.utc))
    except Exception:
        logger.exception("Resetting ticket counter for %s failed", category)
        return False
    logger.info("Ticket counter for %s reset to 0", category)
    return True


def _dialect_insert(session: AsyncSession):
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise ValueError(f"Unsupported database dialect for counter upsert: {dialect}")


class SqlCounterStore:
    """Counter store backed by the `ticket_counters` table; one short session per call."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def read(self, category: TicketCategory) -> int | None:
        async with self._session_factory() as session:
            return await session.scalar(
                select(TicketCounter.current_number).where(TicketCounter.category == category)
            )

    async def upsert(self, category: TicketCategory, current_number: int, updated_at: datetime) -> None:
        async with self._session_factory() as session, session.begin():
            stmt = _dialect_insert(session)(TicketCounter).values(
                category=category,
                current_number=current_number,
                updated_at=updated_at,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["category"],
                set_={
                    "current_number": stmt.excluded.current_number,
                    "updated_at": stmt.excluded.updated_at,
                },
            )
            await session.execute(stmt)

    async def reset(self, category: TicketCategory, updated_at: datetime) -> None:
        async with self._session_factory() as session, session.begin():
            await session.execute(
                update(TicketCounter)
                .where(TicketCounter.category == category)
                .values(current_number=0, updated_at=updated_at)
            )


async def list_ticket_counters(session: AsyncSession) -> list[TicketCounterOut]:
    rows = (await session.execute(select(TicketCounter).order_by(TicketCounter.category))).scalars().all()
    out: list[TicketCounterOut] = []
    for row in rows:
        fmt = CATEGORY_FORMATS[row.category]
        out.append(
            TicketCounterOut(
                category=row.category,
                current_number=row.current_number,
                updated_at=row.updated_at,
                next_ticket_number=fmt.format((row.current_number % fmt.max_number) + 1),
            )
        )
    return out
