from pydantic import BaseModel
from datetime import datetime
from typing import Literal, Optional


class CheckinOut(BaseModel):
    id: int
    user_id: str
    location_id: str
    location_name: str
    entry_time: datetime
    exit_time: Optional[datetime]
    status: Literal["active", "completed"]

    class Config:
        from_attributes = True


class CheckinRequest(BaseModel):
    location_id: str
    token: str


class ScanRequest(BaseModel):
    payload: str      # decoded QR text, e.g. smartqueue://scan/{locationId}/entry/{token}


class ExitOut(BaseModel):
    checkin: CheckinOut
    time_saved: int   # minutes credited for this visit
