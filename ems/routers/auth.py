"""Authentication route issuing bearer tokens to HR operators."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from ems.core.log import get_logger
from ems.core.security import SecurityProvider, get_security_provider
from ems.schemas.auth import LoginRequest, LoginResponse, OperatorProfile

LOGGER = get_logger(__name__)
router = APIRouter(tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(
    credentials: LoginRequest,
    security: SecurityProvider = Depends(get_security_provider),
) -> LoginResponse:
    """Exchange a username and password for an access token."""

    operator = security.authenticate(credentials.username.strip(), credentials.password)
    token = security.create_access_token(operator)
    LOGGER.info("HR operator logged in", extra={"hr_id": operator.hr_id, "region_id": operator.region_id})
    return LoginResponse(
        access_token=token,
        expires_in=security.token_ttl_seconds,
        hr=OperatorProfile(
            hr_id=operator.hr_id,
            hr_name=operator.hr_name,
            region_id=operator.region_id,
            country_id=operator.country_id,
        ),
    )
