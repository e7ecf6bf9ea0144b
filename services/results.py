"""Plain result values returned by AuthSessionManager."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class UserSummary:
    id: str
    full_name: str
    email: str
    role: str

    @classmethod
    def from_user(cls, user) -> "UserSummary":
        role = user.role.value if hasattr(user.role, "value") else str(user.role)
        return cls(id=user.id, full_name=user.full_name, email=user.email, role=role)


@dataclass(frozen=True)
class LoginResult:
    access_token: str
    expires_at: datetime
    refresh_token: str
    user: UserSummary


@dataclass(frozen=True)
class RefreshResult:
    access_token: str
    expires_at: datetime
    refresh_token: str


@dataclass(frozen=True)
class ForgotPasswordResult:
    success: bool
    message: str
    reset_token: Optional[str] = None


@dataclass(frozen=True)
class ResetPasswordResult:
    success: bool
    message: str
