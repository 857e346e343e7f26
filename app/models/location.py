# app/models/location.py
"""
Locations table — one row per physical campus place.
current_occupancy is only ever changed through atomic UPDATE statements
(see location_registry.adjust_occupancy). Status is derived, never stored.
"""

from sqlalchemy import Column, Integer, String, DateTime, Float
from app.database import Base


class Location(Base):
    __tablename__ = "locations"

    id = Column(String(64), primary_key=True)
    name = Column(String(200), nullable=False)
    type = Column(String(20), nullable=False)               # canteen | library | office | cafe
    current_occupancy = Column(Integer, default=0, nullable=False)
    max_capacity = Column(Integer, default=100, nullable=False)
    avg_wait_time = Column(Integer, default=5, nullable=False)  # minutes
    position_x = Column(Float, default=50.0, nullable=False)    # % of map width
    position_y = Column(Float, default=50.0, nullable=False)    # % of map height
    entry_qr_code = Column(String(100), nullable=False)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    def __repr__(self):
        return f"<Location {self.id} {self.current_occupancy}/{self.max_capacity}>"
