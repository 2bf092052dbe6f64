from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column

from eventpos.core.enums import TicketCategory
from eventpos.models.base import Base
from eventpos.models.sql_enums import ticket_category_enum


class TicketCounter(Base):
    __tablename__ = "ticket_counters"
    __table_args__ = (CheckConstraint("current_number >= 0", name="ck_ticket_counters_current_number_nonnegative"),)

    category: Mapped[TicketCategory] = mapped_column(ticket_category_enum, primary_key=True)
    # Last issued number; 0 means nothing has been issued yet.
    current_number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
