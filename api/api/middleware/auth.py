"""Authentication middleware that extracts and validates bearer tokens.

Extracts ``Authorization: Bearer <token>`` from every request, validates
it via :class:`TokenManager`, and populates ``request.state`` with ``sub``
(the caller's user id) and ``claims``.

Requests to public endpoints bypass authentication.  Every other request
without a valid token is answered with 401 before any route code runs.
"""

from __future__ import annotations

import logging
import os
import secrets
from typing import Any

from pydantic import SecretStr
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from api.security import AuthMode, TokenConfig, TokenManager

logger = logging.getLogger(__name__)

_UNAUTHENTICATED_MESSAGE = "User not authenticated"

# Paths that do not require authentication, for any method.
_PUBLIC_PATHS: frozenset[str] = frozenset(
    {
        "/api/health",
        "/api/styleguide-templates",
        "/docs",
        "/openapi.json",
        "/redoc",
        "/favicon.ico",
    }
)

# Prefixes that skip auth (e.g. static docs assets).
_PUBLIC_PREFIXES: tuple[str, ...] = (
    "/docs",
    "/redoc",
)

# Prefixes that are public for GET only.
_PUBLIC_GET_PREFIXES: tuple[str, ...] = ("/api/styleguide/",)


def _build_token_config() -> TokenConfig:
    """Construct a :class:`TokenConfig` from environment variables.

    - ``AUTH_MODE``: ``development`` (default) or ``oidc``.
    - ``JWT_SECRET``: HMAC secret for development tokens.
    - ``JWT_ALGORITHM``, ``TOKEN_TTL_SECONDS``, ``MAX_TOKEN_TTL_SECONDS``.
    - ``OIDC_ISSUER_URL`` / ``OIDC_AUDIENCE``: required/optional for ``oidc``.
    """
    auth_mode_raw = os.environ.get("AUTH_MODE", "development").lower()
    try:
        auth_mode = AuthMode(auth_mode_raw)
    except ValueError:
        logger.warning("Unknown AUTH_MODE '%s'; falling back to development", auth_mode_raw)
        auth_mode = AuthMode.DEVELOPMENT

    jwt_secret_value = os.environ.get("JWT_SECRET", "")
    if not jwt_secret_value:
        # OIDC validates with the issuer's public keys; the secret is unused there.
        jwt_secret_value = f"dev-{secrets.token_hex(32)}"
        if auth_mode == AuthMode.DEVELOPMENT:
            logger.warning(
                "JWT_SECRET not set; generated random per-process dev secret. "
                "Tokens will not survive process restarts."
            )

    return TokenConfig(
        auth_mode=auth_mode,
        jwt_secret=SecretStr(jwt_secret_value),
        jwt_algorithm=os.environ.get("JWT_ALGORITHM", "HS256"),
        token_ttl_seconds=int(os.environ.get("TOKEN_TTL_SECONDS", "3600")),
        max_token_ttl_seconds=int(os.environ.get("MAX_TOKEN_TTL_SECONDS", "86400")),
        oidc_issuer_url=os.environ.get("OIDC_ISSUER_URL"),
        oidc_audience=os.environ.get("OIDC_AUDIENCE"),
    )


def _is_public_path(method: str, path: str) -> bool:
    """Return ``True`` if the request should bypass authentication."""
    if path in _PUBLIC_PATHS:
        return True
    if any(path.startswith(prefix) for prefix in _PUBLIC_PREFIXES):
        return True
    return method in ("GET", "HEAD") and any(path.startswith(prefix) for prefix in _PUBLIC_GET_PREFIXES)


def _unauthenticated() -> JSONResponse:
    return JSONResponse(status_code=401, content={"message": _UNAUTHENTICATED_MESSAGE})


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Starlette middleware that enforces Bearer token authentication.

    On each request the middleware:

    1. Lets public paths through untouched.
    2. Extracts the ``Authorization: Bearer <token>`` header.
    3. Validates the token via :class:`TokenManager`.
    4. Stores ``sub`` and ``claims`` on ``request.state``.
    5. Returns 401 ``{"message": "User not authenticated"}`` on failure.
    """

    def __init__(self, app: Any, token_manager: TokenManager | None = None) -> None:
        super().__init__(app)
        self._token_manager = token_manager or TokenManager(_build_token_config())
        logger.info("AuthenticationMiddleware initialised (mode=%s)", self._token_manager.auth_mode.value)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if _is_public_path(request.method, request.url.path):
            return await call_next(request)

        auth_header = request.headers.get("authorization")
        if not auth_header:
            return _unauthenticated()

        parts = auth_header.split(None, 1)
        if len(parts) != 2 or parts[0].lower() != "bearer":
            return _unauthenticated()

        try:
            claims = self._token_manager.validate_token(parts[1])
        except PermissionError as exc:
            logger.info("Rejected token on %s: %s", request.url.path, exc)
            return _unauthenticated()

        request.state.sub = claims.sub
        request.state.claims = claims
        return await call_next(request)
