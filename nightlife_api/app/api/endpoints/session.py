"""
Session endpoints: registration, credential login, logout and the
current-session check the front-end calls on page load.

Response shapes are kept exactly as the existing front-end expects
them, including the 200 status on a duplicate username.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from nightlife_api.app.api.payload import body_of
from nightlife_api.app.core.errors import (
    MSG_CREDENTIALS_REQUIRED,
    MSG_USERNAME_TAKEN,
    AuthenticationError,
    ConflictError,
    StorageError,
)
from nightlife_api.app.core.security import get_session_user, login_session, logout_session
from nightlife_api.app.schemas.user import Credentials, SessionUser
from nightlife_api.app.services.attendance_service import AttendanceService
from nightlife_api.app.services.auth_service import AuthService, LocalCredential
from nightlife_api.app.services.user_service import UserService


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/current-session")
async def current_session(
    current_user: Optional[SessionUser] = Depends(get_session_user),
):
    """Report whether the caller is logged in and which venues they attend."""
    if current_user is None:
        return {"currentlyLoggedIn": False}
    try:
        venues_attending_ids = await AttendanceService.list_attendance_ids(current_user.user_id)
    except StorageError as exc:
        logger.exception("Error listing venues for user %s", current_user.user_id)
        return {"error": str(exc)}
    return {
        "currentlyLoggedIn": True,
        "userId": current_user.user_id,
        "username": current_user.username,
        "venuesAttendingIds": venues_attending_ids,
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(credentials: Credentials = Depends(body_of(Credentials))):
    """Register a new local account.

    Returns 400 when a field is missing, 200 with an ``error`` when the
    username is taken and 201 on success.
    """
    if not credentials.username or not credentials.password:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": MSG_CREDENTIALS_REQUIRED},
        )
    # Cheap pre-check so a taken name does not pay for password hashing.
    # The UNIQUE constraint still decides races.
    try:
        if await UserService.find_by_username(credentials.username) is not None:
            return JSONResponse(status_code=status.HTTP_200_OK, content={"error": MSG_USERNAME_TAKEN})
        await UserService.insert_if_absent(credentials.username, credentials.password)
    except ConflictError:
        return JSONResponse(status_code=status.HTTP_200_OK, content={"error": MSG_USERNAME_TAKEN})
    except StorageError:
        logger.exception("Error inserting user %s into the database", credentials.username)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )
    return {"message": "User created successfully"}


@router.post("/login")
async def login(
    request: Request,
    credentials: Credentials = Depends(body_of(Credentials)),
):
    """Log in with username and password and start a session."""
    try:
        user = await AuthService.authenticate(
            LocalCredential(credentials.username or "", credentials.password or "")
        )
    except AuthenticationError:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"currentlyLoggedIn": False},
        )
    session_user = login_session(request, user)
    logger.info("User %s logged in", session_user.username)
    try:
        venues_attending_ids = await AttendanceService.list_attendance_ids(session_user.user_id)
    except StorageError as exc:
        logger.exception("Error listing venues for user %s", session_user.user_id)
        return {"error": str(exc)}
    return {
        "loginSuccessful": True,
        "userId": session_user.user_id,
        "username": session_user.username,
        "venuesAttendingIds": venues_attending_ids,
    }


@router.get("/logout")
async def logout(request: Request):
    logout_session(request)
    return {"logoutSuccessful": True}
