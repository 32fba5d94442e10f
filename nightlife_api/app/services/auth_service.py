"""
Authentication variants.

Local credentials and OAuth profiles are the only two ways to log in.
Both go through :meth:`AuthService.authenticate`, which returns the
stored user or raises ``AuthenticationError``.  Writing the result to
the session cookie is left to the endpoint (see ``core.security``).
"""

import logging
from dataclasses import dataclass
from typing import Union

from nightlife_api.app.core.errors import AuthenticationError, ConflictError
from nightlife_api.app.schemas.user import UserRead
from nightlife_api.app.services.user_service import UserService


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalCredential:
    username: str
    password: str


@dataclass(frozen=True)
class OAuthProfile:
    """Identity returned by an OAuth provider after a successful handshake."""

    provider: str
    username: str


AuthVariant = Union[LocalCredential, OAuthProfile]


class AuthService:
    """Resolve an authentication variant to a stored user."""

    @classmethod
    async def authenticate(cls, variant: AuthVariant) -> UserRead:
        if isinstance(variant, LocalCredential):
            return await cls._authenticate_local(variant)
        if isinstance(variant, OAuthProfile):
            return await cls._authenticate_oauth(variant)
        raise TypeError(f"Unsupported authentication variant: {type(variant).__name__}")

    @classmethod
    async def _authenticate_local(cls, credential: LocalCredential) -> UserRead:
        user = await UserService.verify(credential.username, credential.password)
        if user is None:
            logger.info("Failed login for %s", credential.username)
            raise AuthenticationError("Invalid credentials")
        return user

    @classmethod
    async def _authenticate_oauth(cls, profile: OAuthProfile) -> UserRead:
        """Find the user matching the provider username, creating it on first login.

        Accounts are matched by username only, so an existing local
        account with the same name is reused.
        """
        if not profile.username:
            raise AuthenticationError(f"{profile.provider} profile has no username")
        user = await UserService.find_by_username(profile.username)
        if user is not None:
            return user
        try:
            user = await UserService.insert_if_absent(profile.username, None)
        except ConflictError:
            # Lost a race with a concurrent first login for the same name.
            user = await UserService.find_by_username(profile.username)
            if user is None:
                raise
            return user
        logger.info("Created %s user %s on first login", profile.provider, profile.username)
        return user
