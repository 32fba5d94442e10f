"""
Security helpers for password hashing and session authentication.

Passwords are hashed with PBKDF2‑HMAC using SHA‑256 and a random
16‑byte salt.  The iteration count is chosen so that a single
verification takes well over 100 ms on commodity hardware, which keeps
offline brute force expensive.  Hashes are stored as
``salthex$hashhex``.

Authenticated identities live in the signed session cookie managed by
Starlette's ``SessionMiddleware``.  Only the user id and username are
stored; the cookie is signed, not encrypted, so nothing secret may be
placed in it.
"""

import hashlib
import hmac
import os
from typing import Dict, Optional

from fastapi import Depends, Request

from .errors import NotAuthenticatedError
from ..schemas.user import SessionUser, UserRead


PASSWORD_HASH_ITERATIONS = 600_000
SESSION_USER_KEY = "user"


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2‑HMAC with SHA‑256.

    Parameters
    ----------
    password : str
        The plain text password to hash.

    Returns
    -------
    str
        Salt and hash concatenated with ``$``.
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt, PASSWORD_HASH_ITERATIONS
    )
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a plain password against a stored salt+hash string.

    Accounts created through OAuth have no local password
    (``hashed_password`` is ``None``) and never verify.  Malformed hashes
    are treated as a mismatch.
    """
    if not hashed_password or "$" not in hashed_password:
        return False
    salt_hex, hash_hex = hashed_password.split("$", 1)
    try:
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac(
        "sha256", plain_password.encode("utf-8"), salt, PASSWORD_HASH_ITERATIONS
    )
    return hmac.compare_digest(dk, stored_hash)


# ---------------------------------------------------------------------------
# Session helpers
# ---------------------------------------------------------------------------

def login_session(request: Request, user: UserRead) -> SessionUser:
    """Attach ``user`` to the request's session cookie."""
    session_user = SessionUser(user_id=user.user_id, username=user.username)
    request.session[SESSION_USER_KEY] = session_user.model_dump()
    return session_user


def logout_session(request: Request) -> None:
    """Drop everything stored in the session cookie."""
    request.session.clear()


def get_session_user(request: Request) -> Optional[SessionUser]:
    """Dependency returning the logged in user, or ``None`` for anonymous callers."""
    data: Optional[Dict] = request.session.get(SESSION_USER_KEY)
    if not data:
        return None
    return SessionUser(**data)


def require_session_user(
    current_user: Optional[SessionUser] = Depends(get_session_user),
) -> SessionUser:
    """Dependency for protected routes.

    Raises :class:`NotAuthenticatedError`, which the application turns
    into an HTTP 401 response before the route handler runs.
    """
    if current_user is None:
        raise NotAuthenticatedError()
    return current_user
