from __future__ import annotations

from sqlalchemy import Enum

from eventpos.core.enums import OrderStatus, TicketCategory


def _enum_values(enum_cls: type) -> list[str]:
    return [member.value for member in enum_cls]


# Persist the lowercase values, not the member names.
ticket_category_enum = Enum(TicketCategory, name="ticket_category", values_callable=_enum_values, validate_strings=True)
order_status_enum = Enum(OrderStatus, name="order_status", values_callable=_enum_values, validate_strings=True)
