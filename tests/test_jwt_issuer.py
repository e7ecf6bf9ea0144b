"""Tests for JwtSettings and JwtIssuer."""
from datetime import timedelta
from types import SimpleNamespace

import jwt
import pytest

from models.base_model import utcnow
from models.user import Role
from services.errors import AuthMessages, AuthenticationError, ConfigurationError, TokenExpiredError
from services.jwt_issuer import JwtIssuer, JwtSettings
from tests.conftest import TEST_CONFIG


@pytest.fixture
def issuer():
    return JwtIssuer(JwtSettings.from_mapping(TEST_CONFIG))


@pytest.fixture
def principal():
    return SimpleNamespace(id="user-1", email="u1@x.com", role=Role.MANAGER)


class TestSettings:
    @pytest.mark.parametrize("key", ["JWT_SECRET", "JWT_ISSUER", "JWT_AUDIENCE"])
    def test_missing_required_setting_fails_fast(self, key):
        config = dict(TEST_CONFIG)
        config[key] = None
        with pytest.raises(ConfigurationError):
            JwtSettings.from_mapping(config)

    def test_blank_secret_fails_fast(self):
        with pytest.raises(ConfigurationError):
            JwtSettings.from_mapping(dict(TEST_CONFIG, JWT_SECRET="   "))

    def test_unparsable_ttl_falls_back_to_default(self):
        settings = JwtSettings.from_mapping(dict(TEST_CONFIG, ACCESS_TOKEN_MINUTES="soon"))
        assert settings.access_ttl == timedelta(minutes=60)

    def test_settings_are_immutable(self):
        settings = JwtSettings.from_mapping(TEST_CONFIG)
        with pytest.raises(AttributeError):
            settings.secret = "other"


class TestIssuer:
    def test_issue_embeds_identity(self, issuer, principal):
        now = utcnow()
        token, expires_at = issuer.issue(principal, now)

        assert expires_at == now + timedelta(minutes=60)
        claims = issuer.decode(token)
        assert claims["sub"] == "user-1"
        assert claims["email"] == "u1@x.com"
        assert claims["role"] == "Manager"
        assert claims["iss"] == TEST_CONFIG["JWT_ISSUER"]
        assert claims["aud"] == TEST_CONFIG["JWT_AUDIENCE"]
        assert claims["type"] == "access"

    def test_each_token_has_its_own_id(self, issuer, principal):
        now = utcnow()
        first, _ = issuer.issue(principal, now)
        second, _ = issuer.issue(principal, now)
        assert issuer.decode(first)["jti"] != issuer.decode(second)["jti"]

    def test_expired_token(self, issuer, principal):
        token, _ = issuer.issue(principal, utcnow() - timedelta(hours=2))
        with pytest.raises(TokenExpiredError) as exc:
            issuer.decode(token)
        assert exc.value.message == AuthMessages.ACCESS_TOKEN_EXPIRED

    def test_wrong_audience_rejected(self, principal):
        token, _ = JwtIssuer(JwtSettings.from_mapping(dict(TEST_CONFIG, JWT_AUDIENCE="someone-else"))).issue(
            principal, utcnow()
        )
        issuer = JwtIssuer(JwtSettings.from_mapping(TEST_CONFIG))
        with pytest.raises(AuthenticationError):
            issuer.decode(token)

    def test_tampered_signature_rejected(self, issuer, principal):
        token, _ = issuer.issue(principal, utcnow())
        forged = jwt.encode(
            jwt.decode(token, options={"verify_signature": False}),
            "a-different-secret-of-sufficient-length",
            algorithm="HS256",
        )
        with pytest.raises(AuthenticationError):
            issuer.decode(forged)

    def test_non_access_token_rejected(self, issuer):
        now = utcnow()
        token = jwt.encode(
            {
                "sub": "user-1",
                "iss": TEST_CONFIG["JWT_ISSUER"],
                "aud": TEST_CONFIG["JWT_AUDIENCE"],
                "exp": now + timedelta(minutes=5),
                "type": "refresh",
            },
            TEST_CONFIG["JWT_SECRET"],
            algorithm="HS256",
        )
        with pytest.raises(AuthenticationError):
            issuer.decode(token)
