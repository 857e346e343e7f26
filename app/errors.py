# app/errors.py
"""
Domain error taxonomy.
Services raise these; app.main maps each one to an HTTP response with its status_code.
"""


class SmartQueueError(Exception):
    """Base class for every error a manager operation can surface to the caller."""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    @property
    def name(self) -> str:
        return type(self).__name__


class NotFound(SmartQueueError):
    """Location, ticket or check-in does not exist."""
    status_code = 404


class Unauthenticated(SmartQueueError):
    """No signed-in user on the request."""
    status_code = 401


class Forbidden(SmartQueueError):
    """Signed in, but not an administrator."""
    status_code = 403


class Conflict(SmartQueueError):
    """Duplicate check-in, already at the location, or checked in elsewhere."""
    status_code = 409


class InvalidFormat(SmartQueueError):
    """QR payload does not match the expected shape."""
    status_code = 400


class InvalidToken(SmartQueueError):
    """QR token does not match the location's current token."""
    status_code = 403


class Unavailable(SmartQueueError):
    """Transient store or network failure."""
    status_code = 503
