"""Bearer-token issuing and validation.

Two modes, selected with ``AUTH_MODE``:

``development``
    HMAC-SHA256 signed tokens of the form
    ``dev.<urlsafe-b64 JSON payload>.<hex signature>``.  Used locally and
    in tests; :meth:`TokenManager.generate_token` mints them.

``oidc``
    RS256 JWTs issued by the external identity provider, verified with
    PyJWT against the issuer's JWKS document.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import logging
import time
import uuid
from enum import Enum
from typing import Any

import httpx
import jwt
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError

logger = logging.getLogger(__name__)

_DEV_PREFIX = "dev."
_ISSUER = "brand-studio"


class AuthMode(str, Enum):
    DEVELOPMENT = "development"
    OIDC = "oidc"


class TokenConfig(BaseModel):
    """Token validation settings.  ``jwt_secret`` has no default."""

    auth_mode: AuthMode = AuthMode.DEVELOPMENT
    jwt_secret: SecretStr
    jwt_algorithm: str = "HS256"
    token_ttl_seconds: int = 3600
    max_token_ttl_seconds: int = 86400
    oidc_issuer_url: str | None = None
    oidc_audience: str | None = None


class TokenClaims(BaseModel):
    """Validated identity claims.

    ``sub`` is the stable per-user identifier.  Profile claims are
    optional and only used to seed the ``users`` row.
    """

    model_config = ConfigDict(extra="allow")

    sub: str = Field(..., min_length=1)
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    iss: str = _ISSUER
    iat: float = Field(default_factory=time.time)
    exp: float | None = None
    jti: str = Field(default_factory=lambda: uuid.uuid4().hex)


class OIDCProvider:
    """Validates RS256 tokens from an OpenID Connect issuer.

    The signing keys are fetched from ``<issuer>/.well-known/jwks.json`` on
    first use and re-fetched when a token names an unknown ``kid``.
    """

    def __init__(self, issuer_url: str, audience: str | None = None, *, timeout: float = 5.0) -> None:
        self._issuer_url = issuer_url.rstrip("/")
        self._audience = audience
        self._timeout = timeout
        self._keys: dict[str, dict[str, Any]] = {}

    def _fetch_jwks(self) -> None:
        url = f"{self._issuer_url}/.well-known/jwks.json"
        response = httpx.get(url, timeout=self._timeout)
        response.raise_for_status()
        self._keys = {key["kid"]: key for key in response.json().get("keys", []) if "kid" in key}
        logger.info("Loaded %d signing key(s) from %s", len(self._keys), url)

    def _get_signing_key(self, kid: str) -> dict[str, Any]:
        if kid not in self._keys:
            try:
                self._fetch_jwks()
            except httpx.HTTPError as exc:
                raise PermissionError(f"Unable to load signing keys: {exc}") from exc
        key = self._keys.get(kid)
        if key is None:
            raise PermissionError(f"Unknown signing key: {kid}")
        return key

    def validate_token(self, token: str) -> TokenClaims:
        try:
            header = jwt.get_unverified_header(token)
        except jwt.PyJWTError as exc:
            raise PermissionError(f"Malformed token: {exc}") from exc

        key_data = self._get_signing_key(str(header.get("kid", "")))
        public_key = jwt.algorithms.RSAAlgorithm.from_jwk(key_data)

        # The header's alg is ignored; only RS256 is accepted.
        try:
            payload = jwt.decode(
                token,
                key=public_key,
                algorithms=["RS256"],
                audience=self._audience,
                issuer=self._issuer_url,
                options={"verify_aud": self._audience is not None},
            )
        except jwt.ExpiredSignatureError as exc:
            raise PermissionError("Token has expired") from exc
        except jwt.PyJWTError as exc:
            raise PermissionError(f"Invalid token: {exc}") from exc

        try:
            return TokenClaims.model_validate(payload)
        except ValidationError as exc:
            raise PermissionError("Token is missing required claims") from exc


class TokenManager:
    """Issue development tokens and validate tokens for the configured mode."""

    def __init__(self, config: TokenConfig) -> None:
        self._config = config
        self._oidc: OIDCProvider | None = None
        if config.auth_mode is AuthMode.OIDC:
            if not config.oidc_issuer_url:
                raise ValueError("OIDC_ISSUER_URL is required when AUTH_MODE=oidc")
            self._oidc = OIDCProvider(config.oidc_issuer_url, config.oidc_audience)

    @property
    def auth_mode(self) -> AuthMode:
        return self._config.auth_mode

    def _sign(self, payload_json: str) -> str:
        return hmac.new(
            self._config.jwt_secret.get_secret_value().encode("utf-8"),
            payload_json.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

    def generate_token(self, sub: str, *, ttl_seconds: int | None = None, **profile: Any) -> str:
        """Mint a development token for *sub*.

        *ttl_seconds* is capped at ``max_token_ttl_seconds``.  Extra keyword
        arguments (``email``, ``first_name``...) become profile claims.
        """
        ttl = min(ttl_seconds or self._config.token_ttl_seconds, self._config.max_token_ttl_seconds)
        now = time.time()
        claims = TokenClaims(sub=sub, iat=now, exp=now + ttl, **profile)
        payload_json = json.dumps(claims.model_dump(exclude_none=True))
        encoded = base64.urlsafe_b64encode(payload_json.encode("utf-8")).decode("ascii")
        return f"{_DEV_PREFIX}{encoded}.{self._sign(payload_json)}"

    def validate_token(self, token: str) -> TokenClaims:
        """Return the token's claims or raise ``PermissionError``."""
        if self._oidc is not None:
            return self._oidc.validate_token(token)
        return self._validate_dev_token(token)

    def _validate_dev_token(self, token: str) -> TokenClaims:
        if not token.startswith(_DEV_PREFIX):
            raise PermissionError("Unsupported token format")
        try:
            encoded, signature = token[len(_DEV_PREFIX) :].rsplit(".", 1)
            payload_json = base64.urlsafe_b64decode(encoded.encode("ascii")).decode("utf-8")
        except (ValueError, binascii.Error, UnicodeDecodeError) as exc:
            raise PermissionError("Malformed token") from exc

        if not hmac.compare_digest(self._sign(payload_json), signature):
            raise PermissionError("Signature mismatch")

        try:
            claims = TokenClaims.model_validate_json(payload_json)
        except ValidationError as exc:
            raise PermissionError("Token is missing required claims") from exc

        if claims.exp is not None and claims.exp < time.time():
            raise PermissionError("Token has expired")
        return claims
