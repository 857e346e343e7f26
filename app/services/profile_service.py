# app/services/profile_service.py
"""User profile creation and preference updates."""

from datetime import datetime
from sqlalchemy.orm import Session
from app.errors import NotFound
from app.models.user_profile import UserProfile
from app.schemas.auth import AuthUser
from app.schemas.user_profile import PreferencesUpdate
from app.utils.logger import get_logger

logger = get_logger(__name__)


def ensure_profile(db: Session, user: AuthUser) -> UserProfile:
    """Return the user's profile, creating it the first time the user is seen."""
    profile = db.query(UserProfile).filter(UserProfile.uid == user.uid).first()
    if profile:
        return profile

    profile = UserProfile(
        uid=user.uid,
        email=user.email,
        display_name=user.display_name,
        photo_url=user.photo_url,
        total_time_saved=0,
        total_queues_joined=0,
        current_location_id=None,
        current_location_name=None,
        created_at=datetime.utcnow(),
    )
    db.add(profile)
    db.commit()
    logger.info(f"[PROFILE] Created profile for {user.uid} ({user.email})")
    return profile


def get_profile(db: Session, uid: str) -> UserProfile:
    profile = db.query(UserProfile).filter(UserProfile.uid == uid).first()
    if not profile:
        raise NotFound(f"Profile '{uid}' not found")
    return profile


def update_preferences(db: Session, user: AuthUser, changes: PreferencesUpdate) -> UserProfile:
    """Apply only the notification/privacy flags present in the request."""
    profile = ensure_profile(db, user)
    updates = changes.model_dump(exclude_none=True)
    for field, value in updates.items():
        setattr(profile, field, value)
    db.commit()
    logger.info(f"[PROFILE] {user.uid} updated preferences: {sorted(updates)}")
    return profile
