"""
Access-token issuance via PyJWT.

JwtSettings is built once from the app config and injected into JwtIssuer;
nothing here reads global state.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Mapping, Tuple

import jwt

from services.errors import AuthMessages, AuthenticationError, ConfigurationError, TokenExpiredError
from services.settings import parse_int

DEFAULT_ACCESS_TOKEN_MINUTES = 60


@dataclass(frozen=True)
class JwtSettings:
    secret: str
    issuer: str
    audience: str
    algorithm: str = "HS256"
    access_token_minutes: int = DEFAULT_ACCESS_TOKEN_MINUTES

    def __post_init__(self):
        for name in ("secret", "issuer", "audience"):
            value = getattr(self, name)
            if not value or not str(value).strip():
                raise ConfigurationError(f"JWT {name} not configured")

    @property
    def access_ttl(self) -> timedelta:
        return timedelta(minutes=self.access_token_minutes)

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "JwtSettings":
        return cls(
            secret=config.get("JWT_SECRET"),
            issuer=config.get("JWT_ISSUER"),
            audience=config.get("JWT_AUDIENCE"),
            algorithm=config.get("JWT_ALGORITHM") or "HS256",
            access_token_minutes=parse_int(config.get("ACCESS_TOKEN_MINUTES"), DEFAULT_ACCESS_TOKEN_MINUTES),
        )


class JwtIssuer:
    def __init__(self, settings: JwtSettings):
        self.settings = settings

    def issue(self, user, now: datetime) -> Tuple[str, datetime]:
        """Sign an access token for ``user``; returns (token, expires_at)."""
        expires_at = now + self.settings.access_ttl
        payload = {
            "iss": self.settings.issuer,
            "aud": self.settings.audience,
            "sub": str(user.id),
            "email": user.email,
            "role": user.role.value if hasattr(user.role, "value") else str(user.role),
            "iat": now,
            "exp": expires_at,
            "jti": str(uuid.uuid4()),
            "type": "access",
        }
        try:
            token = jwt.encode(payload, self.settings.secret, algorithm=self.settings.algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            raise AuthenticationError(AuthMessages.TOKEN_GENERATION_FAILED) from exc
        return token, expires_at

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Verify signature, expiry, issuer and audience of an access token.
        Used by the HTTP layer only.
        """
        try:
            decoded = jwt.decode(
                token,
                self.settings.secret,
                algorithms=[self.settings.algorithm],
                audience=self.settings.audience,
                issuer=self.settings.issuer,
                options={"require": ["exp", "sub", "iss", "aud"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError(AuthMessages.ACCESS_TOKEN_EXPIRED)
        except jwt.InvalidTokenError:
            raise AuthenticationError(AuthMessages.INVALID_ACCESS_TOKEN)

        if decoded.get("type") != "access":
            raise AuthenticationError(AuthMessages.INVALID_ACCESS_TOKEN)
        return decoded
