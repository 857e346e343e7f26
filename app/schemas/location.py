from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal, Optional

LocationType = Literal["canteen", "library", "office", "cafe"]
LocationStatus = Literal["safe", "busy", "crowded"]


class PositionOut(BaseModel):
    x: float
    y: float

    class Config:
        from_attributes = True


class LocationOut(BaseModel):
    id: str
    name: str
    type: LocationType
    current_occupancy: int
    max_capacity: int
    avg_wait_time: int
    occupancy_percent: float
    status: LocationStatus
    position: PositionOut
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LocationCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    type: LocationType = "canteen"
    max_capacity: int = Field(default=100, gt=0)
    position_x: float = Field(default=50, ge=0, le=100)
    position_y: float = Field(default=50, ge=0, le=100)


class LocationUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    type: Optional[LocationType] = None
    max_capacity: Optional[int] = Field(default=None, gt=0)
    position_x: Optional[float] = Field(default=None, ge=0, le=100)
    position_y: Optional[float] = Field(default=None, ge=0, le=100)


class SuggestionOut(BaseModel):
    message: str
    time_saved: int
    location: LocationOut

    class Config:
        from_attributes = True
