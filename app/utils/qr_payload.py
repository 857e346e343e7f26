# app/utils/qr_payload.py
"""
Entry QR payloads.

Printed QR codes encode:  {scheme}://scan/{locationId}/entry/{token}
The token is opaque and rotated by admins; it only needs low collision
probability (timestamp + random suffix), it is not a secret key.
"""

import re
import secrets
import string
import time
from dataclasses import dataclass
from typing import Optional

from app.config import settings
from app.errors import InvalidFormat

_BASE36 = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 9


@dataclass(frozen=True)
class QRPayload:
    location_id: str
    action: str        # always "entry"; exit is an in-app action
    token: str


def _pattern(scheme: str) -> re.Pattern:
    return re.compile(rf"{re.escape(scheme)}://scan/([^/\s]+)/(entry)/([^/\s]+)")


def parse_qr_payload(text: str, scheme: Optional[str] = None) -> QRPayload:
    """Parse a decoded QR string. Raises InvalidFormat for anything but the exact entry shape."""
    # exact shape: no surrounding whitespace, no trailing newline
    match = _pattern(scheme or settings.QR_SCHEME).fullmatch(text or "")
    if not match:
        raise InvalidFormat("Invalid QR code format")
    location_id, action, token = match.groups()
    return QRPayload(location_id=location_id, action=action, token=token)


def build_entry_payload(location_id: str, token: str, scheme: Optional[str] = None) -> str:
    return f"{scheme or settings.QR_SCHEME}://scan/{location_id}/entry/{token}"


def generate_token(prefix: Optional[str] = None) -> str:
    """e.g. smartqueue-1739961000123-k3j9x0a2b"""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(_SUFFIX_LENGTH))
    return f"{prefix or settings.QR_TOKEN_PREFIX}-{int(time.time() * 1000)}-{suffix}"
