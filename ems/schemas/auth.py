"""Schema definitions for operator login."""
from __future__ import annotations

from pydantic import BaseModel


class LoginRequest(BaseModel):
    username: str
    password: str


class OperatorProfile(BaseModel):
    hr_id: int
    hr_name: str
    region_id: int
    country_id: int


class LoginResponse(BaseModel):
    """Bearer token returned to the client after a successful login."""

    message: str = "Login successful"
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    hr: OperatorProfile
