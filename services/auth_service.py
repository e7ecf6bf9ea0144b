"""
AuthSessionManager: login, refresh-token rotation, logout and password recovery.

The manager works on plain values and raises the errors in services.errors;
it knows nothing about Flask. All writes go through the shared DBStorage
session and are committed here, one commit per state change.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from models.base_model import utcnow
from services.errors import AuthMessages, AuthenticationError, TokenExpiredError, UnauthorizedError
from services.jwt_issuer import JwtIssuer, JwtSettings
from services.notifier import LoggingResetNotifier, ResetTokenNotifier
from services.password_hasher import PasswordHasher
from services.results import (
    ForgotPasswordResult,
    LoginResult,
    RefreshResult,
    ResetPasswordResult,
    UserSummary,
)
from services.settings import parse_bool, parse_int
from services.token_store import PasswordResetStore, RefreshTokenStore
from services.user_directory import UserDirectory

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_TOKEN_DAYS = 7
DEFAULT_PASSWORD_RESET_HOURS = 1


class AuthSessionManager:
    def __init__(
        self,
        storage,
        users: UserDirectory,
        hasher: PasswordHasher,
        issuer: JwtIssuer,
        refresh_tokens: RefreshTokenStore,
        reset_tokens: PasswordResetStore,
        refresh_token_days: int = DEFAULT_REFRESH_TOKEN_DAYS,
        password_reset_hours: int = DEFAULT_PASSWORD_RESET_HOURS,
        expose_reset_token: bool = False,
        notifier: Optional[ResetTokenNotifier] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.storage = storage
        self.users = users
        self.hasher = hasher
        self.issuer = issuer
        self.refresh_tokens = refresh_tokens
        self.reset_tokens = reset_tokens
        self.refresh_ttl = timedelta(days=refresh_token_days)
        self.reset_ttl = timedelta(hours=password_reset_hours)
        self.expose_reset_token = expose_reset_token
        self.notifier = notifier or LoggingResetNotifier()
        self.clock = clock
        self._dummy_hash = None

    @classmethod
    def from_config(
        cls,
        storage,
        config: Mapping[str, Any],
        notifier: Optional[ResetTokenNotifier] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> "AuthSessionManager":
        """
        Wire the manager and its collaborators from a config mapping
        (a Flask app.config or a plain dict). Raises ConfigurationError
        when the JWT key, issuer or audience is missing.
        """
        return cls(
            storage=storage,
            users=UserDirectory(storage),
            hasher=PasswordHasher(),
            issuer=JwtIssuer(JwtSettings.from_mapping(config)),
            refresh_tokens=RefreshTokenStore(storage, clock=clock),
            reset_tokens=PasswordResetStore(storage, clock=clock),
            refresh_token_days=parse_int(config.get("REFRESH_TOKEN_DAYS"), DEFAULT_REFRESH_TOKEN_DAYS),
            password_reset_hours=parse_int(config.get("PASSWORD_RESET_HOURS"), DEFAULT_PASSWORD_RESET_HOURS),
            expose_reset_token=parse_bool(config.get("EXPOSE_RESET_TOKEN"), False),
            notifier=notifier,
            clock=clock,
        )

    # -- login ---------------------------------------------------------------

    def login(self, email: str, password: str) -> LoginResult:
        user = self.validate_credentials(email, password)
        now = self.clock()
        access_token, expires_at = self.issuer.issue(user, now)
        refresh = self.refresh_tokens.create(user.id, self.refresh_ttl)
        self.storage.save()
        logger.info("User %s logged in", user.id)
        return LoginResult(
            access_token=access_token,
            expires_at=expires_at,
            refresh_token=refresh.token,
            user=UserSummary.from_user(user),
        )

    def validate_credentials(self, email: str, password: str):
        """Return the user or raise AuthenticationError; unknown email and bad password look the same."""
        user = self.users.get_by_email(email)
        if user is None:
            # burn a verify so a missing account costs the same as a wrong password
            self.hasher.verify(password, self._get_dummy_hash())
            logger.warning("Failed login attempt for unknown account")
            raise AuthenticationError(AuthMessages.INVALID_CREDENTIALS)
        if not self.hasher.verify(password, user.password_hash):
            logger.warning("Failed login attempt for user %s", user.id)
            raise AuthenticationError(AuthMessages.INVALID_CREDENTIALS)
        return user

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self.hasher.hash("not-a-real-password")
        return self._dummy_hash

    # -- refresh / logout ----------------------------------------------------

    def refresh_session(self, refresh_token: str, access_token: Optional[str] = None) -> RefreshResult:
        """
        Rotate a refresh token. The presented access token is accepted for
        request compatibility only; the refresh token alone decides.
        """
        row = self.refresh_tokens.get_by_token(refresh_token)
        if row is None:
            raise TokenExpiredError(AuthMessages.INVALID_REFRESH_TOKEN)
        if row.is_used or row.is_revoked:
            logger.warning("Reuse of %s refresh token for user %s", "used" if row.is_used else "revoked", row.user_id)
            raise UnauthorizedError(AuthMessages.REFRESH_TOKEN_REVOKED)

        now = self.clock()
        if row.expires_at <= now:
            raise TokenExpiredError(AuthMessages.INVALID_REFRESH_TOKEN)

        user = self.users.get_by_id(row.user_id)
        if user is None:
            logger.error("Refresh token %s has no owning user", row.id)
            raise AuthenticationError(AuthMessages.USER_NOT_FOUND)

        new_access_token, expires_at = self.issuer.issue(user, now)

        # The old token's CAS and the new row share one transaction, so a
        # concurrent revoke_all_for_user either waits for it or sees the new row.
        try:
            # single use: only one concurrent caller gets rowcount 1
            if not self.refresh_tokens.mark_used(row.token):
                self.storage.rollback()
                logger.warning("Lost refresh race for user %s", user.id)
                raise UnauthorizedError(AuthMessages.REFRESH_TOKEN_REVOKED)
            new_refresh = self.refresh_tokens.create(user.id, self.refresh_ttl)
            self.storage.save()
        except SQLAlchemyError:
            self.storage.rollback()
            raise

        logger.info("Rotated refresh token for user %s", user.id)
        return RefreshResult(
            access_token=new_access_token,
            expires_at=expires_at,
            refresh_token=new_refresh.token,
        )

    def logout(self, refresh_token: str) -> None:
        if not refresh_token:
            return
        revoked = self.refresh_tokens.mark_revoked(refresh_token)
        self.storage.save()
        if revoked:
            logger.info("Refresh token revoked on logout")

    # -- password recovery ---------------------------------------------------

    def forgot_password(self, email: str) -> ForgotPasswordResult:
        user = self.users.get_by_email(email)
        if user is None:
            logger.info("Password reset requested for unknown account")
            return ForgotPasswordResult(success=True, message=AuthMessages.PASSWORD_RESET_TOKEN_SENT)

        invalidated = self.reset_tokens.invalidate_all_for_email(user.email)
        reset = self.reset_tokens.create(user.email, self.reset_ttl)
        self.storage.save()
        logger.info("Issued password reset token for user %s (%d superseded)", user.id, invalidated)

        self.notifier.send_reset_token(user.email, reset.token, reset.expires_at)
        return ForgotPasswordResult(
            success=True,
            message=AuthMessages.PASSWORD_RESET_TOKEN_SENT,
            reset_token=reset.token if self.expose_reset_token else None,
        )

    def reset_password(self, token: str, new_password: str, confirm_password: Optional[str] = None) -> ResetPasswordResult:
        """
        Redeem a reset token. ``confirm_password`` equality is enforced by the
        request schema before this is called.

        The password change, the token redemption and the revocation of every
        refresh token of the user share one commit.
        """
        row = self.reset_tokens.get_by_token(token)
        if row is None or not row.is_active(self.clock()):
            return ResetPasswordResult(success=False, message=AuthMessages.INVALID_PASSWORD_RESET_TOKEN)

        user = self.users.get_by_email(row.email)
        if user is None:
            return ResetPasswordResult(success=False, message=AuthMessages.USER_NOT_FOUND)

        new_hash = self.hasher.hash(new_password)
        try:
            if not self.reset_tokens.mark_used(row.token):
                self.storage.rollback()
                return ResetPasswordResult(success=False, message=AuthMessages.INVALID_PASSWORD_RESET_TOKEN)
            user.password_hash = new_hash
            self.users.update(user)
            revoked = self.refresh_tokens.revoke_all_for_user(user.id)
            self.storage.save()
        except SQLAlchemyError:
            self.storage.rollback()
            logger.exception("Password reset for user %s failed, nothing was applied", user.id)
            raise

        logger.info("Password reset for user %s, %d sessions revoked", user.id, revoked)
        return ResetPasswordResult(success=True, message=AuthMessages.PASSWORD_RESET_SUCCESS)
