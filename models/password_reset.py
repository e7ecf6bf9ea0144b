"""
PasswordResetToken model: single-use proof of email ownership.
At most one unused token per email is live at any time; issuing a new one
marks the previous ones used.
"""
from sqlalchemy import Column, String, Boolean, DateTime

from models.base_model import BaseModel, Base


class PasswordResetToken(BaseModel, Base):
    __tablename__ = "password_reset_tokens"

    token = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(100), nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    is_used = Column(Boolean, default=False, nullable=False)

    def is_active(self, now) -> bool:
        return not self.is_used and self.expires_at > now

    def __repr__(self):
        return f"<PasswordResetToken email={self.email} used={self.is_used}>"
