"""
Persistence for refresh tokens and password-reset tokens.

Stores stage changes in the shared session and never commit; the caller owns
the unit of work. State transitions that must happen at most once (rotation,
reset redemption) are conditional UPDATEs whose rowcount tells the caller
whether it won.
"""
from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from models.base_model import utcnow
from models.password_reset import PasswordResetToken
from models.refresh_token import RefreshToken

TOKEN_BYTES = 32


def generate_token() -> str:
    """32 random bytes, URL-safe base64."""
    return secrets.token_urlsafe(TOKEN_BYTES)


class KeyedTokenStore:
    """Lookup by exact token string for a token model."""

    model = None

    def __init__(self, storage, clock: Callable[[], datetime] = utcnow):
        self.storage = storage
        self.clock = clock

    @property
    def session(self):
        return self.storage.get_session()

    def _query(self):
        # Always re-read the row; conditional updates bypass the identity map.
        return self.session.query(self.model).populate_existing()

    def get_by_token(self, token: str):
        if not token:
            return None
        return self._query().filter(self.model.token == token).first()

    def is_valid(self, token: str) -> bool:
        row = self.get_by_token(token)
        return row is not None and row.is_active(self.clock())

    def _update_where(self, values: dict, *criteria) -> int:
        return (
            self.session.query(self.model)
            .filter(*criteria)
            .update(values, synchronize_session=False)
        )


class RefreshTokenStore(KeyedTokenStore):
    model = RefreshToken

    def create(self, user_id: str, ttl: timedelta) -> RefreshToken:
        now = self.clock()
        row = RefreshToken(
            token=generate_token(),
            user_id=user_id,
            expires_at=now + ttl,
            is_used=False,
            is_revoked=False,
            created_at=now,
            updated_at=now,
        )
        self.storage.new(row)
        return row

    def get_by_user_id(self, user_id: str) -> List[RefreshToken]:
        return self._query().filter(RefreshToken.user_id == user_id).order_by(RefreshToken.created_at).all()

    def mark_used(self, token: str) -> bool:
        """Compare-and-set is_used; False if the token was already used or revoked."""
        count = self._update_where(
            {"is_used": True, "updated_at": self.clock()},
            RefreshToken.token == token,
            RefreshToken.is_used.is_(False),
            RefreshToken.is_revoked.is_(False),
        )
        return count == 1

    def mark_revoked(self, token: str) -> bool:
        count = self._update_where(
            {"is_revoked": True, "updated_at": self.clock()},
            RefreshToken.token == token,
            RefreshToken.is_revoked.is_(False),
        )
        return count == 1

    def revoke_all_for_user(self, user_id: str) -> int:
        return self._update_where(
            {"is_revoked": True, "updated_at": self.clock()},
            RefreshToken.user_id == user_id,
            RefreshToken.is_revoked.is_(False),
        )


class PasswordResetStore(KeyedTokenStore):
    model = PasswordResetToken

    def create(self, email: str, ttl: timedelta) -> PasswordResetToken:
        now = self.clock()
        row = PasswordResetToken(
            token=generate_token(),
            email=email,
            expires_at=now + ttl,
            is_used=False,
            created_at=now,
            updated_at=now,
        )
        self.storage.new(row)
        return row

    def get_valid_by_email(self, email: str) -> Optional[PasswordResetToken]:
        return (
            self._query()
            .filter(
                PasswordResetToken.email == email,
                PasswordResetToken.is_used.is_(False),
                PasswordResetToken.expires_at > self.clock(),
            )
            .order_by(PasswordResetToken.created_at.desc())
            .first()
        )

    def mark_used(self, token: str) -> bool:
        """Compare-and-set is_used on a still-valid token."""
        count = self._update_where(
            {"is_used": True, "updated_at": self.clock()},
            PasswordResetToken.token == token,
            PasswordResetToken.is_used.is_(False),
            PasswordResetToken.expires_at > self.clock(),
        )
        return count == 1

    def invalidate_all_for_email(self, email: str) -> int:
        return self._update_where(
            {"is_used": True, "updated_at": self.clock()},
            PasswordResetToken.email == email,
            PasswordResetToken.is_used.is_(False),
        )
