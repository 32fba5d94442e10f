"""
Pydantic models for venue attendance requests.

The front-end sends camelCase keys (``venueYelpId``, ``userId``); the
models expose them under snake_case attribute names.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AttendanceRequest(BaseModel):
    """Body of ``/venues-attending`` and ``/venue-remove``."""

    model_config = ConfigDict(populate_by_name=True)

    venue_yelp_id: Optional[str] = Field(None, alias="venueYelpId", examples=["biz-1"])
    user_id: Optional[int] = Field(None, alias="userId", examples=[1])
