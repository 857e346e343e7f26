# app/services/queue_service.py
"""
Virtual queue tickets.

join_queue:
  - refused while the user is checked in anywhere (exit first)
  - position_in_line = max(1, occupancy // 10 + 1), a display estimate taken
    at join time. Two users joining concurrently can get the same number.
    It is NOT a serialized FIFO position.
  - credits the user with floor(avg_wait_time * QUEUE_TIME_SAVED_RATIO) minutes

cancel_ticket deletes the caller's own ticket and is idempotent. Credits are not reversed.
"""

import math
import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
from app.config import settings
from app.errors import Conflict, Unauthenticated
from app.models.ticket import Ticket
from app.models.user_profile import UserProfile
from app.schemas.auth import AuthUser
from app.services.location_registry import get_location
from app.services.profile_service import ensure_profile
from app.utils.logger import get_logger

logger = get_logger(__name__)


def estimate_position(current_occupancy: int) -> int:
    return max(1, current_occupancy // 10 + 1)


def queue_time_credit(avg_wait_time: int) -> int:
    return math.floor(avg_wait_time * settings.QUEUE_TIME_SAVED_RATIO)


async def join_queue(db: Session, user: Optional[AuthUser], location_id: str) -> Ticket:
    if user is None:
        raise Unauthenticated("Sign in to join a queue")

    location = get_location(db, location_id)
    profile = ensure_profile(db, user)

    if profile.current_location_id == location_id:
        logger.warning(f"[QUEUE] {user.uid} already at {location_id} — join refused")
        raise Conflict("You are already at this location")
    if profile.current_location_id:
        logger.warning(f"[QUEUE] {user.uid} checked in at {profile.current_location_id} — join refused")
        raise Conflict(f"Exit {profile.current_location_name} first before joining another queue")

    ticket = Ticket(
        id=f"TKT-{uuid.uuid4().hex[:12].upper()}",
        user_id=user.uid,
        location_id=location.id,
        location_name=location.name,
        position_in_line=estimate_position(location.current_occupancy),
        estimated_time=location.avg_wait_time,
        status="active",
        created_at=datetime.utcnow(),
    )
    credit = queue_time_credit(location.avg_wait_time)

    db.add(ticket)
    db.query(UserProfile).filter(UserProfile.uid == user.uid).update(
        {
            UserProfile.total_queues_joined: UserProfile.total_queues_joined + 1,
            UserProfile.total_time_saved: UserProfile.total_time_saved + credit,
        },
        synchronize_session=False,
    )
    db.commit()
    logger.info(
        f"[QUEUE] {user.uid} joined {location.name} | ticket={ticket.id} "
        f"pos≈{ticket.position_in_line} eta={ticket.estimated_time}min credit={credit}min"
    )
    return ticket


async def cancel_ticket(db: Session, user: Optional[AuthUser], ticket_id: str) -> bool:
    """
    Delete one of the caller's tickets. Returns False (no error) when it is
    already gone. Another user's ticket is treated as missing.
    """
    if user is None:
        raise Unauthenticated("Sign in to cancel a ticket")
    ticket = (
        db.query(Ticket)
        .filter(Ticket.id == ticket_id, Ticket.user_id == user.uid)
        .first()
    )
    if not ticket:
        logger.debug(f"[QUEUE] Cancel of missing ticket {ticket_id} by {user.uid}, no-op")
        return False
    db.delete(ticket)
    db.commit()
    logger.info(f"[QUEUE] Ticket {ticket_id} cancelled by {user.uid}")
    return True


def list_tickets(db: Session, user: Optional[AuthUser]) -> list[Ticket]:
    if user is None:
        raise Unauthenticated("Sign in to view your tickets")
    return (
        db.query(Ticket)
        .filter(Ticket.user_id == user.uid)
        .order_by(Ticket.created_at.desc())
        .all()
    )
