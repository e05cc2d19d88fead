"""
OrganiJob - Authentication Schemas

Pydantic schemas for auth request/response validation.
"""
from pydantic import BaseModel
from typing import Any, Optional


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------

class Credentials(BaseModel):
    """
    Schema for register and login requests.

    Fields are loosely typed on purpose: missing or malformed values are
    normalized and rejected by the service with a readable message.
    """
    email: Optional[Any] = None
    password: Optional[Any] = None


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------

class UserResponse(BaseModel):
    """Public user data."""
    id: str
    email: str

    @classmethod
    def from_record(cls, user) -> "UserResponse":
        return cls(id=user.id, email=user.email)


class AuthResponse(BaseModel):
    """Schema for register and login responses."""
    token: str
    user: UserResponse


class MeResponse(BaseModel):
    user: UserResponse


class OkResponse(BaseModel):
    ok: bool = True
