"""
GitHub OAuth login.

``/login/github`` redirects to GitHub with a random ``state`` kept in
the session; the callback checks it, resolves the GitHub login to a
local user (creating one on first login) and redirects back to the
front-end.  Every failure ends in a redirect to
``settings.login_failure_redirect`` without a session.
"""

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from nightlife_api.app.core.config import settings
from nightlife_api.app.core.dependencies import get_github_client
from nightlife_api.app.core.errors import AuthenticationError, StorageError
from nightlife_api.app.core.security import login_session
from nightlife_api.app.services.auth_service import AuthService
from nightlife_api.app.services.github_service import GitHubOAuthClient


logger = logging.getLogger(__name__)

router = APIRouter()

OAUTH_STATE_KEY = "github_oauth_state"


@router.get("/login/github")
async def login_github(
    request: Request,
    github: GitHubOAuthClient = Depends(get_github_client),
) -> RedirectResponse:
    state = secrets.token_urlsafe(16)
    request.session[OAUTH_STATE_KEY] = state
    return RedirectResponse(github.authorize_url(state))


@router.get("/login/github/callback")
async def login_github_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    github: GitHubOAuthClient = Depends(get_github_client),
) -> RedirectResponse:
    expected_state = request.session.pop(OAUTH_STATE_KEY, None)
    if not code or not state or state != expected_state:
        logger.warning("Rejected GitHub callback with missing code or mismatched state")
        return RedirectResponse(settings.login_failure_redirect)
    try:
        profile = await github.fetch_profile(code)
        user = await AuthService.authenticate(profile)
    except (AuthenticationError, StorageError) as exc:
        logger.error("GitHub login failed: %s", exc)
        return RedirectResponse(settings.login_failure_redirect)
    login_session(request, user)
    logger.info("User %s logged in via GitHub", user.username)
    return RedirectResponse(settings.login_success_redirect)
