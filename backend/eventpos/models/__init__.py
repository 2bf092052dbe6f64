from eventpos.models.audit_log import AuditLog
from eventpos.models.order import Order, OrderItem
from eventpos.models.ticket_counter import TicketCounter

__all__ = [
    "AuditLog",
    "Order",
    "OrderItem",
    "TicketCounter",
]
