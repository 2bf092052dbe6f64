from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from eventpos.core.enums import OrderStatus, TicketCategory


class OrderItemIn(BaseModel):
    product_id: int | None = None
    name: str = Field(min_length=1, max_length=200)
    unit_price_cents: int = Field(ge=0)
    quantity: int = Field(ge=1)


class OrderCreate(BaseModel):
    items: list[OrderItemIn] = Field(min_length=1)
    # Optional client-side total; rejected if it disagrees with the items.
    total_cents: int | None = Field(default=None, ge=0)
    session_token: str | None = Field(default=None, max_length=120)


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    product_id: int | None
    name: str
    unit_price_cents: int
    quantity: int
    subtotal_cents: int


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    ticket_number: str
    category: TicketCategory
    status: OrderStatus
    total_cents: int
    session_token: str | None
    created_at: datetime
    updated_at: datetime
    items: list[OrderItemOut]
