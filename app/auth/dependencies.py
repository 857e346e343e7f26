"""
Authentication dependencies for FastAPI.

Sign-in is handled by the external identity provider; the gateway in front of
this API forwards the verified identity as request headers:
  X-User-Id     provider uid (required for an authenticated request)
  X-User-Email  email, used as the admin key
  X-User-Name   display name
  X-User-Photo  avatar URL

The resolved AuthUser (or None) is handed to services explicitly.
"""

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import Forbidden, Unauthenticated
from app.schemas.auth import AuthUser
from app.services.admin_service import is_admin
from app.services.profile_service import ensure_profile


def get_current_user_optional(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    x_user_email: Optional[str] = Header(None, alias="X-User-Email"),
    x_user_name: Optional[str] = Header(None, alias="X-User-Name"),
    x_user_photo: Optional[str] = Header(None, alias="X-User-Photo"),
    db: Session = Depends(get_db),
) -> Optional[AuthUser]:
    """
    Get the current user if the gateway asserted one, None otherwise.
    First sight of a user creates their profile.
    """
    if not x_user_id:
        return None

    user = AuthUser(
        uid=x_user_id,
        email=x_user_email,
        display_name=x_user_name,
        photo_url=x_user_photo,
    )
    ensure_profile(db, user)
    return user


def get_current_user(user: Optional[AuthUser] = Depends(get_current_user_optional)) -> AuthUser:
    """Get the current user. Raises Unauthenticated (401) when there is none."""
    if user is None:
        raise Unauthenticated("Not signed in")
    return user


def verify_admin_access(
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> AuthUser:
    """Admin access requires an admins row for the caller's email with role 'admin'."""
    if not is_admin(db, user.email):
        raise Forbidden("Admin access required")
    return user
