"""QR check-in and in-app exit."""

from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.auth.dependencies import get_current_user_optional
from app.database import get_db
from app.schemas.auth import AuthUser
from app.schemas.checkin import CheckinOut, CheckinRequest, ExitOut, ScanRequest
from app.services import checkin_service

router = APIRouter()


@router.post("/checkins/scan", response_model=CheckinOut, status_code=201,
             summary="Check in with a decoded entry QR string")
async def scan_entry_qr(
    body: ScanRequest,
    user: Optional[AuthUser] = Depends(get_current_user_optional),
    db: Session = Depends(get_db),
):
    return await checkin_service.check_in_from_scan(db, user, body.payload)


@router.post("/checkins", response_model=CheckinOut, status_code=201,
             summary="Check in with a location id and entry token")
async def check_in(
    body: CheckinRequest,
    user: Optional[AuthUser] = Depends(get_current_user_optional),
    db: Session = Depends(get_db),
):
    return await checkin_service.check_in(db, user, body.location_id, body.token)


@router.post("/checkins/{location_id}/exit", response_model=ExitOut,
             summary="Leave a location")
async def exit_location(
    location_id: str,
    user: Optional[AuthUser] = Depends(get_current_user_optional),
    db: Session = Depends(get_db),
):
    checkin, credit = await checkin_service.exit_location(db, user, location_id)
    return {"checkin": checkin, "time_saved": credit}


@router.get("/checkins/current", response_model=Optional[CheckinOut])
def get_current_checkin(
    user: Optional[AuthUser] = Depends(get_current_user_optional),
    db: Session = Depends(get_db),
):
    """The caller's active check-in, or null."""
    return checkin_service.current_checkin(db, user)
