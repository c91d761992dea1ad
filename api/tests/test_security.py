"""Tests for bearer-token handling and the authentication middleware.

Covers:
- TokenConfig has no insecure secret default
- TokenManager development tokens: round trip, tampering, expiry, TTL cap
- OIDCProvider only accepts RS256 regardless of the token header
- AuthenticationMiddleware public paths and 401 responses
"""

from __future__ import annotations

import time
from unittest.mock import MagicMock, patch

import pytest
from pydantic import SecretStr, ValidationError

from api.middleware.auth import _is_public_path
from api.security import AuthMode, OIDCProvider, TokenConfig, TokenManager


@pytest.fixture()
def manager() -> TokenManager:
    return TokenManager(TokenConfig(jwt_secret=SecretStr("unit-test-secret")))


# ---------------------------------------------------------------------------
# TokenConfig
# ---------------------------------------------------------------------------


class TestTokenConfig:
    def test_requires_jwt_secret(self) -> None:
        with pytest.raises(ValidationError):
            TokenConfig()  # type: ignore[call-arg]

    def test_secret_not_exposed_in_repr(self) -> None:
        config = TokenConfig(jwt_secret=SecretStr("super-secret-key"))
        assert "super-secret-key" not in str(config)

    def test_defaults(self) -> None:
        config = TokenConfig(jwt_secret=SecretStr("test"))
        assert config.auth_mode is AuthMode.DEVELOPMENT
        assert config.jwt_algorithm == "HS256"
        assert config.token_ttl_seconds == 3600
        assert config.max_token_ttl_seconds == 86400

    def test_oidc_mode_requires_issuer(self) -> None:
        with pytest.raises(ValueError, match="OIDC_ISSUER_URL"):
            TokenManager(TokenConfig(auth_mode=AuthMode.OIDC, jwt_secret=SecretStr("x")))


# ---------------------------------------------------------------------------
# Development tokens
# ---------------------------------------------------------------------------


class TestDevelopmentTokens:
    def test_round_trip_preserves_profile_claims(self, manager: TokenManager) -> None:
        token = manager.generate_token("user-1", email="a@example.com", first_name="Ada")

        claims = manager.validate_token(token)

        assert token.startswith("dev.")
        assert claims.sub == "user-1"
        assert claims.email == "a@example.com"
        assert claims.first_name == "Ada"
        assert claims.iss == "brand-studio"

    def test_tampered_signature_rejected(self, manager: TokenManager) -> None:
        token = manager.generate_token("user-1")
        tampered = token[:-4] + ("0000" if not token.endswith("0000") else "1111")

        with pytest.raises(PermissionError, match="Signature mismatch"):
            manager.validate_token(tampered)

    def test_token_from_other_secret_rejected(self, manager: TokenManager) -> None:
        other = TokenManager(TokenConfig(jwt_secret=SecretStr("another-secret")))

        with pytest.raises(PermissionError):
            manager.validate_token(other.generate_token("user-1"))

    def test_expired_token_rejected(self, manager: TokenManager) -> None:
        token = manager.generate_token("user-1", ttl_seconds=1)

        with patch("api.security.time.time", return_value=time.time() + 10):
            with pytest.raises(PermissionError, match="expired"):
                manager.validate_token(token)

    def test_ttl_is_capped(self) -> None:
        config = TokenConfig(jwt_secret=SecretStr("s"), max_token_ttl_seconds=60)
        manager = TokenManager(config)

        claims = manager.validate_token(manager.generate_token("u", ttl_seconds=10_000))

        assert claims.exp is not None
        assert claims.exp - claims.iat == pytest.approx(60, abs=1)

    @pytest.mark.parametrize("token", ["", "garbage", "dev.", "dev.!!!.abc", "Bearer dev.x.y"])
    def test_malformed_tokens_rejected(self, manager: TokenManager, token: str) -> None:
        with pytest.raises(PermissionError):
            manager.validate_token(token)


# ---------------------------------------------------------------------------
# OIDC
# ---------------------------------------------------------------------------


class TestOIDCProvider:
    def test_validate_token_uses_rs256_only(self) -> None:
        provider = OIDCProvider(issuer_url="https://auth.example.com", audience="studio")

        # Header claims HS256 (algorithm confusion attempt).
        fake_header = {"alg": "HS256", "kid": "key-1"}
        fake_key_data = {"kid": "key-1", "kty": "RSA", "n": "fake", "e": "AQAB"}

        with (
            patch("jwt.get_unverified_header", return_value=fake_header),
            patch.object(provider, "_get_signing_key", return_value=fake_key_data),
            patch("jwt.algorithms.RSAAlgorithm.from_jwk", return_value=MagicMock()),
            patch("jwt.decode") as mock_decode,
        ):
            mock_decode.return_value = {
                "sub": "user1",
                "email": "u1@example.com",
                "iss": "https://auth.example.com",
                "iat": time.time(),
                "exp": time.time() + 3600,
            }

            claims = provider.validate_token("fake.jwt.token")

            assert mock_decode.call_args[1]["algorithms"] == ["RS256"]
            assert mock_decode.call_args[1]["audience"] == "studio"
            assert claims.sub == "user1"
            assert claims.email == "u1@example.com"

    def test_unknown_kid_rejected(self) -> None:
        provider = OIDCProvider(issuer_url="https://auth.example.com")

        with (
            patch("jwt.get_unverified_header", return_value={"alg": "RS256", "kid": "missing"}),
            patch.object(provider, "_fetch_jwks", return_value=None),
        ):
            with pytest.raises(PermissionError, match="Unknown signing key"):
                provider.validate_token("fake.jwt.token")

    def test_missing_sub_rejected(self) -> None:
        provider = OIDCProvider(issuer_url="https://auth.example.com")

        with (
            patch("jwt.get_unverified_header", return_value={"alg": "RS256", "kid": "k"}),
            patch.object(provider, "_get_signing_key", return_value={"kid": "k"}),
            patch("jwt.algorithms.RSAAlgorithm.from_jwk", return_value=MagicMock()),
            patch("jwt.decode", return_value={"iss": "https://auth.example.com"}),
        ):
            with pytest.raises(PermissionError, match="missing required claims"):
                provider.validate_token("fake.jwt.token")


# ---------------------------------------------------------------------------
# AuthenticationMiddleware
# ---------------------------------------------------------------------------


class TestPublicPaths:
    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("GET", "/api/health"),
            ("GET", "/api/styleguide-templates"),
            ("GET", "/api/styleguide/demo123"),
            ("GET", "/docs"),
            ("GET", "/openapi.json"),
        ],
    )
    def test_public(self, method: str, path: str) -> None:
        assert _is_public_path(method, path)

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("POST", "/api/styleguide"),
            ("POST", "/api/styleguide-chat"),
            ("GET", "/api/auth/user"),
            ("GET", "/api/onboarding"),
            ("GET", "/api/usage"),
            ("POST", "/api/domains"),
        ],
    )
    def test_protected(self, method: str, path: str) -> None:
        assert not _is_public_path(method, path)


class TestAuthenticationMiddleware:
    @pytest.mark.asyncio
    async def test_missing_header_is_401(self, anon_client, mock_session):
        resp = await anon_client.get("/api/onboarding")

        assert resp.status_code == 401
        assert resp.json() == {"message": "User not authenticated"}
        mock_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_non_bearer_scheme_is_401(self, anon_client):
        resp = await anon_client.get("/api/usage", headers={"Authorization": "Basic dXNlcjpwYXNz"})

        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_token_is_401(self, anon_client):
        resp = await anon_client.get("/api/usage", headers={"Authorization": "Bearer dev.bad.token"})

        assert resp.status_code == 401
        assert resp.json() == {"message": "User not authenticated"}

    @pytest.mark.asyncio
    async def test_health_is_public(self, anon_client):
        resp = await anon_client.get("/api/health")

        assert resp.status_code == 200

    @pytest.mark.asyncio
    async def test_correlation_id_is_echoed(self, anon_client):
        resp = await anon_client.get("/api/health", headers={"X-Correlation-ID": "corr-123"})

        assert resp.headers["X-Correlation-ID"] == "corr-123"

    @pytest.mark.asyncio
    async def test_malformed_correlation_id_is_replaced(self, anon_client):
        resp = await anon_client.get("/api/health", headers={"X-Correlation-ID": "bad id\twith spaces"})

        echoed = resp.headers["X-Correlation-ID"]
        assert echoed != "bad id\twith spaces"
        assert len(echoed) == 32
