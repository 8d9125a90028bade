"""Application middleware to enforce bearer-token authentication."""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ems.core.log import get_logger, request_scope
from ems.core.security import AuthenticatedOperator, AuthenticationError, SecurityProvider

LOGGER = get_logger(__name__)

_BEARER_PREFIX = "bearer "


def _extract_bearer(header: str | None) -> str | None:
    if not header or not header.lower().startswith(_BEARER_PREFIX):
        return None
    token = header[len(_BEARER_PREFIX):].strip()
    return token or None


class AuthMiddleware(BaseHTTPMiddleware):
    """Reject requests without a valid access token.

    A missing token yields 401 and an invalid or expired one 403. The decoded
    operator is stored on ``request.state.operator`` and bound to the log
    context for the duration of the request.
    """

    def __init__(
        self,
        app,
        security_provider: SecurityProvider,
        *,
        exempt_paths: Iterable[str] | None = None,
        exempt_prefixes: Iterable[str] | None = None,
    ) -> None:
        super().__init__(app)
        self._security_provider = security_provider
        self._exempt_paths = set(exempt_paths or ()) | {"/login", "/health"}
        self._exempt_prefixes = tuple(exempt_prefixes or ("/uploads",))

    def _is_exempt(self, path: str) -> bool:
        """Return ``True`` when the request path should bypass authentication."""

        if path in self._exempt_paths:
            return True
        for prefix in self._exempt_prefixes:
            if path.startswith(prefix):
                return True
        return path in {"/openapi.json", "/docs", "/redoc", "/favicon.ico"}

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request.state.operator = None
        if self._is_exempt(request.url.path):
            return await call_next(request)

        token = _extract_bearer(request.headers.get("Authorization"))
        if token is None:
            return JSONResponse({"message": "Access token missing"}, status_code=401)

        try:
            operator: AuthenticatedOperator = self._security_provider.decode_token(token)
        except AuthenticationError as exc:
            LOGGER.info("Failed to decode access token", extra={"reason": str(exc)})
            return JSONResponse({"message": "Invalid or expired token"}, status_code=403)

        request.state.operator = operator
        with request_scope(
            hr_id=operator.hr_id,
            region_id=operator.region_id,
            request=f"{request.method} {request.url.path}",
        ):
            return await call_next(request)


__all__ = ["AuthMiddleware"]
