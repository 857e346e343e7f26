# app/models/ticket.py
"""
Virtual-queue tickets.
position_in_line is a display estimate taken at join time, not a FIFO index.
"""

from sqlalchemy import Column, Integer, String, DateTime
from app.database import Base


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(128), nullable=False, index=True)
    location_id = Column(String(64), nullable=False, index=True)
    location_name = Column(String(200), nullable=False)     # snapshot at join time
    position_in_line = Column(Integer, nullable=False)
    estimated_time = Column(Integer, nullable=False)        # minutes
    status = Column(String(20), default="active", nullable=False)  # active | ready | completed
    created_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<Ticket {self.id} loc={self.location_id} pos={self.position_in_line}>"
