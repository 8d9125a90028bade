"""Operator authentication: bcrypt credential checks and JWT access tokens."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
from fastapi import HTTPException, Request, status
from jwt import ExpiredSignatureError, InvalidTokenError
from sqlalchemy.orm import sessionmaker

from ems.core.config import AuthSettings
from ems.core.errors import AccountInactive, InvalidCredentials
from ems.core.log import get_logger
from ems.repositories.operator_repository import OperatorRepository

LOGGER = get_logger(__name__)


class AuthenticationError(Exception):
    """Raised when token validation fails."""


@dataclass(frozen=True, slots=True)
class AuthenticatedOperator:
    """The HR operator behind a request, with the region it may manage."""

    hr_id: int
    hr_name: str
    region_id: int
    country_id: int
    username: str | None = None


def _prepare_password(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes.
    return password.encode("utf-8")[:72]


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash suitable for ``hr_login.password_hash``."""

    return bcrypt.hashpw(_prepare_password(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_prepare_password(password), password_hash.encode("utf-8"))
    except ValueError:
        LOGGER.warning("Stored password hash is not a bcrypt hash")
        return False


class SecurityProvider:
    """Authenticate HR operators and issue/verify JWT access tokens."""

    def __init__(self, settings: AuthSettings, session_factory: sessionmaker) -> None:
        self._settings = settings
        self._session_factory = session_factory

    @property
    def token_ttl_seconds(self) -> int:
        """Return the access token lifetime in seconds."""

        return int(self._settings.access_token_expire_minutes * 60)

    def authenticate(self, username: str, password: str) -> AuthenticatedOperator:
        """Validate credentials against the credential store.

        Raises ``InvalidCredentials`` for an unknown username or a wrong
        password and ``AccountInactive`` when the password matches a disabled
        account.
        """

        with self._session_factory() as session:
            record = OperatorRepository(session).get_by_username(username)

        if record is None or not verify_password(password, record.password_hash):
            raise InvalidCredentials()
        if not record.is_active:
            raise AccountInactive()

        return AuthenticatedOperator(
            hr_id=record.hr_id,
            hr_name=record.hr_name,
            region_id=record.region_id,
            country_id=record.country_id,
            username=record.username,
        )

    def create_access_token(self, operator: AuthenticatedOperator) -> str:
        """Create a signed JWT for the authenticated operator."""

        now = datetime.now(tz=timezone.utc)
        expires = now + timedelta(minutes=self._settings.access_token_expire_minutes)
        payload: dict[str, object] = {
            "sub": str(operator.hr_id),
            "hr_id": operator.hr_id,
            "hr_name": operator.hr_name,
            "region_id": operator.region_id,
            "country_id": operator.country_id,
            "iat": int(now.timestamp()),
            "exp": int(expires.timestamp()),
        }
        if operator.username:
            payload["username"] = operator.username
        return jwt.encode(payload, self._settings.secret_key, algorithm=self._settings.algorithm)

    def decode_token(self, token: str) -> AuthenticatedOperator:
        """Decode a JWT and return the corresponding ``AuthenticatedOperator``."""

        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key,
                algorithms=[self._settings.algorithm],
            )
        except ExpiredSignatureError as exc:
            raise AuthenticationError("Token expired") from exc
        except InvalidTokenError as exc:
            raise AuthenticationError("Invalid token") from exc

        hr_name = payload.get("hr_name")
        if not isinstance(hr_name, str):
            raise AuthenticationError("Token payload missing required claims")

        resolved: dict[str, int] = {}
        for claim in ("hr_id", "region_id", "country_id"):
            try:
                resolved[claim] = int(payload[claim])
            except (KeyError, TypeError, ValueError) as exc:
                raise AuthenticationError(f"Token {claim} claim invalid") from exc

        username = payload.get("username")
        return AuthenticatedOperator(
            hr_id=resolved["hr_id"],
            hr_name=hr_name,
            region_id=resolved["region_id"],
            country_id=resolved["country_id"],
            username=username if isinstance(username, str) else None,
        )


def get_security_provider(request: Request) -> SecurityProvider:
    """Return the provider created for this application."""

    return request.app.state.security


def get_current_operator(request: Request) -> AuthenticatedOperator:
    """Retrieve the authenticated operator placed on the request by the middleware."""

    operator = getattr(request.state, "operator", None)
    if operator is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Login required")
    return operator


__all__ = [
    "AuthenticatedOperator",
    "AuthenticationError",
    "SecurityProvider",
    "get_current_operator",
    "get_security_provider",
    "hash_password",
    "verify_password",
]
