"""
Yelp proxy endpoints.

Both routes are public and never touch the database.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from nightlife_api.app.core.dependencies import get_yelp_client
from nightlife_api.app.core.errors import (
    MSG_LOCATION_NOT_FOUND,
    LocationNotFoundError,
    UpstreamError,
)
from nightlife_api.app.schemas.yelp import SearchRequest
from nightlife_api.app.services.yelp_service import YelpClient


router = APIRouter()


@router.get("/get-venues-attending/{venue_yelp_id}")
async def get_venue(
    venue_yelp_id: str,
    yelp: YelpClient = Depends(get_yelp_client),
):
    """Relay the Yelp business record for one venue."""
    try:
        return await yelp.get_business(venue_yelp_id)
    except UpstreamError as exc:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc)},
        )


@router.post("/yelp-data/{location}")
async def search_venues(
    location: str,
    body: Optional[SearchRequest] = None,
    yelp: YelpClient = Depends(get_yelp_client),
):
    """Search Yelp for venues around ``location``, five per page."""
    filters = (body or SearchRequest()).to_filters()
    try:
        return await yelp.search_businesses(location, filters)
    except LocationNotFoundError:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"locationFound": False, "message": MSG_LOCATION_NOT_FOUND},
        )
    except UpstreamError:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal Server Error"},
        )
