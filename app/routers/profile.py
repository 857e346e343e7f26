"""Signed-in user's profile, counters and preferences."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.auth.dependencies import get_current_user
from app.database import get_db
from app.schemas.auth import AuthUser
from app.schemas.user_profile import PreferencesUpdate, ProfileOut
from app.services.profile_service import get_profile, update_preferences

router = APIRouter()


@router.get("/profile", response_model=ProfileOut)
def read_profile(user: AuthUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return get_profile(db, user.uid)


@router.patch("/profile/preferences", response_model=ProfileOut,
              summary="Update notification / privacy flags")
def patch_preferences(
    body: PreferencesUpdate,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return update_preferences(db, user, body)
