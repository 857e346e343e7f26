# app/models/checkin.py
"""
Check-in records (presence at a location).
Opened by an entry QR scan, closed by the user's exit action.
"""

from sqlalchemy import Column, Integer, String, DateTime
from app.database import Base


class Checkin(Base):
    __tablename__ = "checkins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(128), nullable=False, index=True)
    location_id = Column(String(64), nullable=False, index=True)
    location_name = Column(String(200), nullable=False)
    entry_time = Column(DateTime, nullable=False)
    exit_time = Column(DateTime)                            # set on exit
    status = Column(String(20), default="active", nullable=False, index=True)  # active | completed

    def __repr__(self):
        return f"<Checkin {self.id} user={self.user_id} loc={self.location_id} {self.status}>"
