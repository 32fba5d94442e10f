"""
Domain exceptions shared by services and endpoints.

Services raise these; endpoints translate them into the JSON payloads
the front-end expects.  ``NotAuthenticatedError`` is the only one with
an application-wide handler (see ``main.create_app``).
"""

from typing import Optional


# User-facing messages
MSG_LOGIN_REQUIRED = "Please login before attempting to access this route."
MSG_CREDENTIALS_REQUIRED = "Both username and password are required"
MSG_USERNAME_TAKEN = "Please select another username"
MSG_VENUE_DATA_MISSING = (
    "Error adding venue to plans. Venue and/or user data not received correctly. "
    "Try refreshing the page and searching again, or else log in again."
)
MSG_USER_MISMATCH = "The requested user does not match the logged in user."
MSG_LOCATION_NOT_FOUND = (
    "No venue information was found for that location, please try searching another locality."
)


class NightlifeError(Exception):
    """Base class for all application errors."""


class ValidationError(NightlifeError):
    """Required request data is missing or malformed."""


class ConflictError(NightlifeError):
    """A unique value (e.g. a username) is already taken."""


class AuthenticationError(NightlifeError):
    """Credentials or an external identity could not be verified."""


class NotAuthenticatedError(NightlifeError):
    """A protected route was called without a session."""

    def __init__(self, message: str = MSG_LOGIN_REQUIRED):
        super().__init__(message)


class StorageError(NightlifeError):
    """A query or transaction failed and was rolled back."""


class UpstreamError(NightlifeError):
    """The upstream API answered with a non-2xx status or was unreachable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class LocationNotFoundError(UpstreamError):
    """The upstream search API could not resolve the requested location."""


class OAuthError(AuthenticationError):
    """The OAuth provider rejected the code exchange or profile lookup."""
