from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from eventpos.core.enums import TicketCategory


class TicketCounterOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category: TicketCategory
    current_number: int
    updated_at: datetime
    next_ticket_number: str
