from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from eventpos.core.config import get_settings
from eventpos.core.enums import OrderStatus
from eventpos.models.order import Order, OrderItem
from eventpos.schemas.orders import OrderCreate
from eventpos.services.audit import audit_log
from eventpos.services.ticket_numbers import CounterStore, generate_ticket_number, get_ticket_type


logger = logging.getLogger(__name__)

MAX_LIST_LIMIT = 500


def resolve_status(status: OrderStatus | str) -> OrderStatus:
    try:
        return OrderStatus(status)
    except ValueError as e:
        raise ValueError(f"Invalid order status: {status!r}") from e


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def create_order(
    session: AsyncSession,
    store: CounterStore,
    *,
    actor: str,
    data: OrderCreate,
    cashier: bool = False,
    drink_range: tuple[int, int] | None = None,
) -> Order:
    """
    Create an order with its items and attach a freshly allocated display code.

    Cashier orders are settled at the till and start out COMPLETED; all other
    orders start PENDING until payment is confirmed.
    """
    subtotals = [item.unit_price_cents * item.quantity for item in data.items]
    total_cents = sum(subtotals)
    if data.total_cents is not None and data.total_cents != total_cents:
        raise ValueError(f"Order total mismatch: expected {total_cents}, got {data.total_cents}")

    if drink_range is None:
        drink_range = get_settings().drink_product_range
    category = get_ticket_type([item.product_id for item in data.items], drink_range=drink_range)

    # Allocate before writing through `session`: the counter store uses its own connection.
    ticket_number = await generate_ticket_number(store, category)

    order = Order(
        ticket_number=ticket_number,
        category=category,
        status=OrderStatus.COMPLETED if cashier else OrderStatus.PENDING,
        total_cents=total_cents,
        session_token=data.session_token,
        items=[
            OrderItem(
                position=idx,
                product_id=item.product_id,
                name=item.name,
                unit_price_cents=item.unit_price_cents,
                quantity=item.quantity,
                subtotal_cents=subtotal,
            )
            for idx, (item, subtotal) in enumerate(zip(data.items, subtotals))
        ],
    )
    session.add(order)
    await session.flush()
    await session.refresh(order, attribute_names=["created_at", "updated_at"])

    await audit_log(
        session,
        actor=actor,
        entity_type="order",
        entity_key=str(order.id),
        action="create",
        after={
            "ticket_number": order.ticket_number,
            "category": order.category,
            "status": order.status,
            "total_cents": order.total_cents,
            "item_count": len(order.items),
        },
    )
    logger.info("Order %s created with ticket number %s", order.id, ticket_number)
    return order


async def get_order(session: AsyncSession, order_id: uuid.UUID) -> Order:
    result = await session.execute(select(Order).where(Order.id == order_id).options(selectinload(Order.items)))
    order = result.scalar_one_or_none()
    if order is None:
        raise ValueError("Order not found")
    return order


async def list_orders(
    session: AsyncSession,
    *,
    status: OrderStatus | str | None = None,
    ticket_number: str | None = None,
    session_token: str | None = None,
    limit: int = 100,
) -> list[Order]:
    if limit < 1 or limit > MAX_LIST_LIMIT:
        raise ValueError(f"limit must be between 1 and {MAX_LIST_LIMIT}")

    stmt = select(Order).options(selectinload(Order.items))
    if status is not None:
        stmt = stmt.where(Order.status == resolve_status(status))
    ticket_number = (ticket_number or "").strip()
    if ticket_number:
        pattern = _escape_like(ticket_number)
        stmt = stmt.where(Order.ticket_number.ilike(f"%{pattern}%", escape="\\"))
    if session_token:
        stmt = stmt.where(Order.session_token == session_token)
    stmt = stmt.order_by(Order.created_at.desc(), Order.ticket_number.desc()).limit(limit)

    return list((await session.execute(stmt)).scalars().all())


async def update_order_status(
    session: AsyncSession,
    *,
    actor: str,
    order_id: uuid.UUID,
    status: OrderStatus | str,
) -> Order:
    status = resolve_status(status)
    order = await get_order(session, order_id)
    before = order.status
    if before == status:
        return order

    order.status = status
    await session.flush()
    await session.refresh(order, attribute_names=["updated_at"])

    await audit_log(
        session,
        actor=actor,
        entity_type="order",
        entity_key=str(order.id),
        action="status_change",
        before={"status": before},
        after={"status": status},
    )
    return order
