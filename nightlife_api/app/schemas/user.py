"""
Pydantic models for user data.

``Credentials`` is the body of ``/register`` and ``/login``.  Both fields
are optional at the schema level so that a missing value produces the
legacy ``{"error": ...}`` payload with status 400 instead of FastAPI's
422 validation response.
"""

from typing import Optional

from pydantic import BaseModel, Field


class Credentials(BaseModel):
    """Username/password pair submitted by the client."""

    username: Optional[str] = Field(None, examples=["alice"])
    password: Optional[str] = Field(None, examples=["pw1234"])


class UserRead(BaseModel):
    """A stored user without its password hash."""

    user_id: int
    username: str

    model_config = {
        "from_attributes": True,
    }


class SessionUser(BaseModel):
    """Identity stored in the session cookie."""

    user_id: int
    username: str
