from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class ProfileOut(BaseModel):
    uid: str
    email: Optional[str]
    display_name: Optional[str]
    photo_url: Optional[str]
    total_time_saved: int
    total_queues_joined: int
    current_location_id: Optional[str]
    current_location_name: Optional[str]
    notifications_enabled: bool
    queue_updates: bool
    turn_reminders: bool
    crowd_alerts: bool
    sound_enabled: bool
    vibration_enabled: bool
    show_profile: bool
    share_location: bool
    share_activity: bool
    anonymous_mode: bool
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class PreferencesUpdate(BaseModel):
    notifications_enabled: Optional[bool] = None
    queue_updates: Optional[bool] = None
    turn_reminders: Optional[bool] = None
    crowd_alerts: Optional[bool] = None
    sound_enabled: Optional[bool] = None
    vibration_enabled: Optional[bool] = None
    show_profile: Optional[bool] = None
    share_location: Optional[bool] = None
    share_activity: Optional[bool] = None
    anonymous_mode: Optional[bool] = None
