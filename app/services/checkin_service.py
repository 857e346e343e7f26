# app/services/checkin_service.py
"""
Check-in / exit (presence at a location).

Flow:
  - user scans the location's entry QR  → check_in: active Checkin, occupancy +1,
    user's current_location pointer set
  - user taps "Exit" in the app          → exit_location: Checkin completed,
    occupancy -1, pointer cleared, time-saved credit

A user is at one location at a time: entry is refused while the pointer is set.
Occupancy is changed with atomic UPDATEs only (location_registry.adjust_occupancy).
Nothing is written until every check has passed.
"""

import math
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
from app.config import settings
from app.errors import Conflict, InvalidToken, NotFound, Unauthenticated
from app.models.checkin import Checkin
from app.models.user_profile import UserProfile
from app.schemas.auth import AuthUser
from app.services.location_registry import adjust_occupancy, broadcast, get_location
from app.services.profile_service import ensure_profile, get_profile
from app.utils.qr_payload import parse_qr_payload
from app.utils.logger import get_logger

logger = get_logger(__name__)


def exit_time_credit(entry_time: datetime, exit_time: datetime) -> int:
    elapsed_minutes = (exit_time - entry_time).total_seconds() / 60
    return max(1, math.floor(elapsed_minutes * settings.CHECKOUT_TIME_SAVED_RATIO))


def _active_checkin(db: Session, uid: str, location_id: str) -> Optional[Checkin]:
    return (
        db.query(Checkin)
        .filter(
            Checkin.user_id == uid,
            Checkin.location_id == location_id,
            Checkin.status == "active",
        )
        .first()
    )


def current_checkin(db: Session, user: Optional[AuthUser]) -> Optional[Checkin]:
    if user is None:
        raise Unauthenticated("Sign in to see your check-in")
    return (
        db.query(Checkin)
        .filter(Checkin.user_id == user.uid, Checkin.status == "active")
        .order_by(Checkin.entry_time.desc())
        .first()
    )


async def check_in(db: Session, user: Optional[AuthUser], location_id: str, token: str) -> Checkin:
    if user is None:
        raise Unauthenticated("Sign in to check in")

    location = get_location(db, location_id)
    if token != location.entry_qr_code:
        logger.warning(f"[CHECKIN] {user.uid} presented a stale/invalid token for {location_id}")
        raise InvalidToken("Invalid or expired QR code")

    profile = ensure_profile(db, user)
    if _active_checkin(db, user.uid, location_id):
        raise Conflict("You are already checked in here")
    if profile.current_location_id:
        logger.warning(f"[CHECKIN] {user.uid} still at {profile.current_location_id} — entry refused")
        raise Conflict(
            f"You need to exit {profile.current_location_name} first before checking in elsewhere"
        )

    checkin = Checkin(
        user_id=user.uid,
        location_id=location.id,
        location_name=location.name,
        entry_time=datetime.utcnow(),
        exit_time=None,
        status="active",
    )
    # Claim the pointer only if it is still empty; a concurrent entry elsewhere
    # that committed first leaves this UPDATE matching no row.
    claimed = db.query(UserProfile).filter(
        UserProfile.uid == user.uid, UserProfile.current_location_id.is_(None)
    ).update(
        {
            UserProfile.current_location_id: location.id,
            UserProfile.current_location_name: location.name,
        },
        synchronize_session=False,
    )
    if not claimed:
        db.rollback()
        holder = get_profile(db, user.uid)
        logger.warning(f"[CHECKIN] {user.uid} lost the entry race to {holder.current_location_id}")
        raise Conflict(
            f"You need to exit {holder.current_location_name} first before checking in elsewhere"
        )

    db.add(checkin)
    adjust_occupancy(db, location.id, +1)
    db.commit()
    logger.info(f"[CHECKIN] {user.uid} checked in at {checkin.location_name}")

    broadcast(db)
    return checkin


async def check_in_from_scan(db: Session, user: Optional[AuthUser], payload: str) -> Checkin:
    """Entry point for a decoded QR string."""
    qr = parse_qr_payload(payload)
    return await check_in(db, user, qr.location_id, qr.token)


async def exit_location(db: Session, user: Optional[AuthUser], location_id: str) -> tuple[Checkin, int]:
    """Close the user's active check-in at location_id. Returns (checkin, minutes credited)."""
    if user is None:
        raise Unauthenticated("Sign in to exit")

    checkin = _active_checkin(db, user.uid, location_id)
    if not checkin:
        raise NotFound(f"No active check-in at '{location_id}'")

    now = datetime.utcnow()
    credit = exit_time_credit(checkin.entry_time, now)
    checkin.status = "completed"
    checkin.exit_time = now

    if not adjust_occupancy(db, location_id, -1):
        logger.warning(f"[EXIT] {location_id} occupancy already at zero (or location removed)")

    db.query(UserProfile).filter(UserProfile.uid == user.uid).update(
        {
            UserProfile.current_location_id: None,
            UserProfile.current_location_name: None,
            UserProfile.total_time_saved: UserProfile.total_time_saved + credit,
        },
        synchronize_session=False,
    )
    db.commit()
    logger.info(f"[EXIT] {user.uid} left {checkin.location_name} | credit={credit}min")

    broadcast(db)
    return checkin, credit
