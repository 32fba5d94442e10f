"""
Venue attendance endpoints.

All routes require a session.  The ``userId`` sent in the body must be
the logged in user; the session is authoritative.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path, status
from fastapi.responses import JSONResponse

from nightlife_api.app.api.payload import body_of
from nightlife_api.app.core.errors import (
    MSG_USER_MISMATCH,
    MSG_VENUE_DATA_MISSING,
    StorageError,
)
from nightlife_api.app.core.security import require_session_user
from nightlife_api.app.schemas.user import SessionUser
from nightlife_api.app.schemas.venue import AttendanceRequest
from nightlife_api.app.services.attendance_service import AttendanceService


logger = logging.getLogger(__name__)

router = APIRouter()


def _reject_invalid(
    body: AttendanceRequest, current_user: SessionUser, flag: str
) -> Optional[JSONResponse]:
    """Return an error response for incomplete or foreign requests, else ``None``."""
    if not body.venue_yelp_id or body.user_id is None:
        return JSONResponse(content={flag: False, "error": MSG_VENUE_DATA_MISSING})
    if body.user_id != current_user.user_id:
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={flag: False, "error": MSG_USER_MISMATCH},
        )
    return None


@router.post("/venues-attending")
async def add_venue_attending(
    body: AttendanceRequest = Depends(body_of(AttendanceRequest)),
    current_user: SessionUser = Depends(require_session_user),
):
    """Add a venue to the logged in user's plans."""
    rejected = _reject_invalid(body, current_user, "insertSuccessful")
    if rejected is not None:
        return rejected
    try:
        await AttendanceService.add_attendance(current_user.user_id, body.venue_yelp_id)
    except StorageError as exc:
        logger.exception("Error adding venue %s for user %s", body.venue_yelp_id, current_user.user_id)
        return {"insertSuccessful": False, "error": str(exc)}
    return {
        "insertSuccessful": True,
        "message": f"Successfully inserted venue with id {body.venue_yelp_id} into database",
    }


@router.post("/venue-remove")
async def remove_venue_attending(
    body: AttendanceRequest = Depends(body_of(AttendanceRequest)),
    current_user: SessionUser = Depends(require_session_user),
):
    """Remove a venue from the logged in user's plans (no-op if absent)."""
    rejected = _reject_invalid(body, current_user, "removeSuccessful")
    if rejected is not None:
        return rejected
    try:
        await AttendanceService.remove_attendance(current_user.user_id, body.venue_yelp_id)
    except StorageError as exc:
        logger.exception("Error removing venue %s for user %s", body.venue_yelp_id, current_user.user_id)
        return {"removeSuccessful": False, "error": str(exc)}
    return {
        "removeSuccessful": True,
        "message": f"Successfully removed venue with id {body.venue_yelp_id} from database",
    }


@router.get("/number-attending/{yelp_id}")
async def number_attending(
    yelp_id: str = Path(..., description="Yelp business id of the venue"),
    current_user: SessionUser = Depends(require_session_user),
):
    try:
        attending_count = await AttendanceService.count_attendees(yelp_id)
    except StorageError as exc:
        logger.exception("Error counting venue attendees for %s", yelp_id)
        return {"countAttendeesSuccessful": False, "error": str(exc)}
    return {"countAttendeesSuccessful": True, "attendingCount": attending_count}
