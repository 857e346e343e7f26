from pydantic import BaseModel
from datetime import datetime
from typing import Literal


class TicketOut(BaseModel):
    id: str
    user_id: str
    location_id: str
    location_name: str
    position_in_line: int     # estimate at join time, not a strict FIFO index
    estimated_time: int       # minutes
    status: Literal["active", "ready", "completed"]
    created_at: datetime

    class Config:
        from_attributes = True
