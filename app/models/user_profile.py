# app/models/user_profile.py
"""
User profiles, keyed by the identity provider's uid.
Counters are incremented atomically; current_location_* is the single-location pointer.
"""

from sqlalchemy import Boolean, Column, Integer, String, DateTime
from app.database import Base


class UserProfile(Base):
    __tablename__ = "users"

    uid = Column(String(128), primary_key=True)
    email = Column(String(320), index=True)
    display_name = Column(String(200))
    photo_url = Column(String(500))
    total_time_saved = Column(Integer, default=0, nullable=False)      # minutes
    total_queues_joined = Column(Integer, default=0, nullable=False)
    current_location_id = Column(String(64))
    current_location_name = Column(String(200))

    # Notification preferences
    notifications_enabled = Column(Boolean, default=True, nullable=False)
    queue_updates = Column(Boolean, default=True, nullable=False)
    turn_reminders = Column(Boolean, default=True, nullable=False)
    crowd_alerts = Column(Boolean, default=True, nullable=False)
    sound_enabled = Column(Boolean, default=True, nullable=False)
    vibration_enabled = Column(Boolean, default=True, nullable=False)

    # Privacy preferences
    show_profile = Column(Boolean, default=True, nullable=False)
    share_location = Column(Boolean, default=True, nullable=False)
    share_activity = Column(Boolean, default=True, nullable=False)
    anonymous_mode = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime)

    def __repr__(self):
        return f"<UserProfile {self.uid} at={self.current_location_id}>"
