from __future__ import annotations

from enum import StrEnum


class TicketCategory(StrEnum):
    TICKET = "ticket"
    DRINK = "drink"


class OrderStatus(StrEnum):
    PENDING = "pending"
    PAID = "paid"
    PREPARING = "preparing"
    COMPLETED = "completed"
