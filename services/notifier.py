"""
Out-of-band delivery of password-reset tokens.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Protocol

logger = logging.getLogger(__name__)


class ResetTokenNotifier(Protocol):
    def send_reset_token(self, email: str, token: str, expires_at: datetime) -> None:
        ...


class LoggingResetNotifier:
    """Records that a reset token was issued. The token itself is never logged."""

    def send_reset_token(self, email: str, token: str, expires_at: datetime) -> None:
        logger.info("Password reset token issued for %s (expires %s)", email, expires_at.isoformat())
