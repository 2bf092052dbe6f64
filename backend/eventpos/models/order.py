from __future__ import annotations

import uuid

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventpos.core.enums import OrderStatus, TicketCategory
from eventpos.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from eventpos.models.sql_enums import order_status_enum, ticket_category_enum


class Order(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "orders"

    # Display code (TI-042 / DR-0107). Not unique: codes wrap around and fallback codes may collide.
    ticket_number: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    category: Mapped[TicketCategory] = mapped_column(ticket_category_enum, nullable=False)
    status: Mapped[OrderStatus] = mapped_column(order_status_enum, nullable=False, default=OrderStatus.PENDING)

    total_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    session_token: Mapped[str | None] = mapped_column(String(120), nullable=True, index=True)

    items: Mapped[list["OrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
    )


class OrderItem(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "order_items"

    order_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    product_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    unit_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    subtotal_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    order: Mapped[Order] = relationship(back_populates="items")
