"""
GitHub OAuth web flow.

Only the two calls needed to identify a user are made: the code is
exchanged for an access token, and the token is used to read
``/user``.  The resulting login becomes the local username.
"""

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx

from nightlife_api.app.core.errors import OAuthError
from nightlife_api.app.services.auth_service import OAuthProfile


logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
TOKEN_URL = "https://github.com/login/oauth/access_token"
USER_URL = "https://api.github.com/user"
DEFAULT_SCOPE = "read:user"


class GitHubOAuthClient:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        callback_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.callback_url = callback_url
        self.timeout = timeout
        self.transport = transport

    def authorize_url(self, state: str, scope: str = DEFAULT_SCOPE) -> str:
        query = urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": self.callback_url,
                "scope": scope,
                "state": state,
            }
        )
        return f"{AUTHORIZE_URL}?{query}"

    async def fetch_profile(self, code: str) -> OAuthProfile:
        """Exchange ``code`` for a token and return the GitHub identity.

        Raises ``OAuthError`` on any HTTP failure or unexpected payload.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                token_response = await client.post(
                    TOKEN_URL,
                    headers={"Accept": "application/json"},
                    data={
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "code": code,
                        "redirect_uri": self.callback_url,
                    },
                )
                token_response.raise_for_status()
                access_token = token_response.json().get("access_token")
                if not access_token:
                    raise OAuthError("GitHub did not return an access token")

                user_response = await client.get(
                    USER_URL,
                    headers={
                        "Accept": "application/vnd.github+json",
                        "Authorization": f"Bearer {access_token}",
                    },
                )
                user_response.raise_for_status()
                login = user_response.json().get("login")
        except httpx.HTTPError as exc:
            logger.error("GitHub OAuth exchange failed: %s", exc)
            raise OAuthError(f"GitHub OAuth exchange failed: {exc}") from exc
        if not login:
            raise OAuthError("GitHub profile has no login")
        return OAuthProfile(provider="github", username=login)
