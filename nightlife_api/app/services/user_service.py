"""
Business logic for users.

``UserService`` is the credential store: it looks users up by
username, registers new ones and verifies local passwords.  Username
uniqueness is enforced by the ``UNIQUE`` constraint on
``users.username`` so two concurrent registrations for the same name
cannot both succeed.

Password hashing and SQLite calls block, so the public coroutines hand
the work to Starlette's threadpool and the event loop stays free.
"""

import logging
import sqlite3
from typing import Optional

from starlette.concurrency import run_in_threadpool

from nightlife_api.app.core.db import get_cursor, transaction
from nightlife_api.app.core.errors import ConflictError
from nightlife_api.app.core.security import hash_password, verify_password
from nightlife_api.app.schemas.user import UserRead


logger = logging.getLogger(__name__)


class UserService:
    """Service for registering and verifying users."""

    @classmethod
    async def find_by_username(cls, username: str) -> Optional[UserRead]:
        """Return the user with exactly this username, or ``None``."""
        return await run_in_threadpool(cls._find_by_username, username)

    @classmethod
    async def insert_if_absent(cls, username: str, password: Optional[str]) -> UserRead:
        """Create a new user.

        ``password`` is hashed before it is stored.  Passing ``None``
        creates an account without a local password (used for OAuth
        sign-ups); such an account can never log in with credentials.
        Raises ``ConflictError`` if the username is already taken.
        """
        user = await run_in_threadpool(cls._insert, username, password)
        logger.info("Registered user %s (id=%s)", username, user.user_id)
        return user

    @classmethod
    async def verify(cls, username: str, password: str) -> Optional[UserRead]:
        """Authenticate a user by username and password.

        Returns ``UserRead`` if the credentials match, otherwise ``None``.
        """
        return await run_in_threadpool(cls._verify, username, password)

    @staticmethod
    def _find_by_username(username: str) -> Optional[UserRead]:
        with get_cursor() as cursor:
            row = cursor.execute(
                "SELECT user_id, username FROM users WHERE username = ?",
                (username,),
            ).fetchone()
        if not row:
            return None
        return UserRead(user_id=row["user_id"], username=row["username"])

    @staticmethod
    def _insert(username: str, password: Optional[str]) -> UserRead:
        hashed = hash_password(password) if password is not None else None
        with transaction() as cursor:
            try:
                cursor.execute(
                    "INSERT INTO users (username, password_hash) VALUES (?, ?)",
                    (username, hashed),
                )
            except sqlite3.IntegrityError as exc:
                raise ConflictError(f"Username {username} already exists") from exc
            user_id = cursor.lastrowid
        return UserRead(user_id=user_id, username=username)

    @staticmethod
    def _verify(username: str, password: str) -> Optional[UserRead]:
        with get_cursor() as cursor:
            row = cursor.execute(
                "SELECT user_id, username, password_hash FROM users WHERE username = ?",
                (username,),
            ).fetchone()
        if not row:
            return None
        if not verify_password(password, row["password_hash"]):
            return None
        return UserRead(user_id=row["user_id"], username=row["username"])
