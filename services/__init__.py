"""Authentication and session lifecycle services."""
from services.auth_service import AuthSessionManager
from services.errors import (
    AuthError,
    AuthMessages,
    AuthenticationError,
    ConfigurationError,
    TokenExpiredError,
    UnauthorizedError,
)
from services.jwt_issuer import JwtIssuer, JwtSettings
from services.password_hasher import PasswordHasher
from services.token_store import PasswordResetStore, RefreshTokenStore
from services.user_directory import UserDirectory

__all__ = [
    "AuthSessionManager",
    "AuthError",
    "AuthMessages",
    "AuthenticationError",
    "ConfigurationError",
    "TokenExpiredError",
    "UnauthorizedError",
    "JwtIssuer",
    "JwtSettings",
    "PasswordHasher",
    "PasswordResetStore",
    "RefreshTokenStore",
    "UserDirectory",
]
