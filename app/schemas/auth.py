"""Identity asserted by the upstream identity provider."""

from typing import Optional

from pydantic import BaseModel


class AuthUser(BaseModel):
    """Authenticated caller, passed explicitly into every manager operation."""

    model_config = {"frozen": True}

    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
