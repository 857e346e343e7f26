# app/services/admin_service.py
"""
Admin provisioning — location CRUD, entry QR rotation, dashboard stats.

Deleting a location also cleans up what points at it:
  - its tickets are deleted
  - its active check-ins are completed (exit_time = now, no time credit)
  - users whose current location it was have the pointer cleared
"""

import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.config import settings
from app.models.admin import Admin
from app.models.checkin import Checkin
from app.models.location import Location
from app.models.ticket import Ticket
from app.models.user_profile import UserProfile
from app.schemas.location import LocationCreate, LocationUpdate
from app.services.location_registry import broadcast, get_location, list_locations
from app.services.status_classifier import occupancy_percent
from app.utils.qr_payload import build_entry_payload, generate_token
from app.utils.logger import get_logger

logger = get_logger(__name__)

ADMIN_ROLE = "admin"


def is_admin(db: Session, email: Optional[str]) -> bool:
    if not email:
        return False
    admin = db.query(Admin).filter(Admin.email == email).first()
    return admin is not None and admin.role == ADMIN_ROLE


def grant_admin(db: Session, email: str) -> Admin:
    admin = db.query(Admin).filter(Admin.email == email).first()
    if admin:
        admin.role = ADMIN_ROLE
    else:
        admin = Admin(email=email, role=ADMIN_ROLE)
        db.add(admin)
    db.commit()
    logger.info(f"[ADMIN] Granted admin role to {email}")
    return admin


async def create_location(db: Session, form: LocationCreate) -> Location:
    now = datetime.utcnow()
    location = Location(
        id=uuid.uuid4().hex[:20],
        name=form.name,
        type=form.type,
        current_occupancy=0,
        max_capacity=form.max_capacity,
        avg_wait_time=settings.DEFAULT_AVG_WAIT_TIME,
        position_x=form.position_x,
        position_y=form.position_y,
        entry_qr_code=generate_token(),
        created_at=now,
        updated_at=now,
    )
    db.add(location)
    db.commit()
    logger.info(f"[ADMIN] Location created: {location.name} ({location.id})")
    broadcast(db)
    return location


async def update_location(db: Session, location_id: str, form: LocationUpdate) -> Location:
    location = get_location(db, location_id)
    for field, value in form.model_dump(exclude_none=True).items():
        setattr(location, field, value)
    location.updated_at = datetime.utcnow()
    db.commit()
    logger.info(f"[ADMIN] Location updated: {location_id}")
    broadcast(db)
    return location


async def delete_location(db: Session, location_id: str):
    location = get_location(db, location_id)
    now = datetime.utcnow()

    tickets = db.query(Ticket).filter(Ticket.location_id == location_id).delete(
        synchronize_session=False
    )
    checkins = db.query(Checkin).filter(
        Checkin.location_id == location_id, Checkin.status == "active"
    ).update(
        {Checkin.status: "completed", Checkin.exit_time: now},
        synchronize_session=False,
    )
    db.query(UserProfile).filter(UserProfile.current_location_id == location_id).update(
        {UserProfile.current_location_id: None, UserProfile.current_location_name: None},
        synchronize_session=False,
    )
    db.delete(location)
    db.commit()
    logger.info(
        f"[ADMIN] Location deleted: {location_id} | voided {tickets} tickets, closed {checkins} check-ins"
    )
    broadcast(db)


async def rotate_qr_code(db: Session, location_id: str) -> Location:
    """Issue a new entry token. Previously printed QR codes stop working."""
    location = get_location(db, location_id)
    location.entry_qr_code = generate_token()
    location.updated_at = datetime.utcnow()
    db.commit()
    logger.info(f"[ADMIN] Entry QR rotated for {location_id}")
    return location


def qr_codes(db: Session) -> list[dict]:
    return [
        {
            "location_id": loc.id,
            "location_name": loc.name,
            "token": loc.entry_qr_code,
            "payload": build_entry_payload(loc.id, loc.entry_qr_code),
        }
        for loc in list_locations(db)
        if loc.entry_qr_code
    ]


def dashboard_stats(db: Session) -> dict:
    locations = list_locations(db)
    active = db.query(func.count(Checkin.id)).filter(Checkin.status == "active").scalar() or 0
    users = db.query(func.count(UserProfile.uid)).scalar() or 0
    total_occupancy = sum(loc.current_occupancy for loc in locations)
    avg_percent = (
        round(sum(occupancy_percent(loc.current_occupancy, loc.max_capacity) for loc in locations)
              / len(locations))
        if locations else 0
    )
    return {
        "active_checkins": active,
        "total_users": users,
        "total_occupancy": total_occupancy,
        "avg_occupancy_percent": avg_percent,
        "location_count": len(locations),
    }
