"""
Auth error taxonomy.

Every error carries a stable ``code`` and a catalogued message so the HTTP
layer can map kind -> status without inspecting text.
"""
from __future__ import annotations


class AuthMessages:
    INVALID_CREDENTIALS = "Invalid email or password"
    USER_NOT_FOUND = "User not found"
    TOKEN_GENERATION_FAILED = "Failed to generate authentication token"
    INVALID_REFRESH_TOKEN = "Invalid or expired refresh token"
    REFRESH_TOKEN_REVOKED = "Refresh token has been revoked"
    INVALID_ACCESS_TOKEN = "Invalid access token"
    ACCESS_TOKEN_EXPIRED = "Access token has expired"
    PASSWORD_RESET_TOKEN_SENT = "Password reset token has been sent to your email"
    INVALID_PASSWORD_RESET_TOKEN = "Invalid or expired password reset token"
    PASSWORD_RESET_SUCCESS = "Password has been reset successfully"


class AuthError(Exception):
    code = "AUTH_ERROR"
    default_message = "Authentication error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationError(AuthError):
    """Credentials rejected, or the identity behind a token is gone."""

    code = "AUTHENTICATION_FAILED"
    default_message = AuthMessages.INVALID_CREDENTIALS


class TokenExpiredError(AuthError):
    """Presented token is unknown or past its expiry."""

    code = "TOKEN_EXPIRED"
    default_message = AuthMessages.INVALID_REFRESH_TOKEN


class UnauthorizedError(AuthError):
    """Presented refresh token was already used or revoked."""

    code = "TOKEN_REVOKED"
    default_message = AuthMessages.REFRESH_TOKEN_REVOKED


class ConfigurationError(Exception):
    """Raised at startup when required auth settings are missing."""
