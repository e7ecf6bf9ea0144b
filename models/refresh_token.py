"""
RefreshToken model: opaque refresh tokens so sessions can be rotated and revoked.
Fields:
- token (unique, random URL-safe string)
- user_id (String(36)) - FK to users.id, removed with the user
- expires_at
- is_used: set once when the token is rotated
- is_revoked: set on logout or on a password reset of the owner
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    token = Column(String(255), nullable=False, unique=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    is_used = Column(Boolean, default=False, nullable=False)
    is_revoked = Column(Boolean, default=False, nullable=False)

    user = relationship("User", back_populates="refresh_tokens")

    def is_active(self, now) -> bool:
        """used, revoked and expired are all terminal."""
        return not self.is_used and not self.is_revoked and self.expires_at > now

    def __repr__(self):
        return f"<RefreshToken user={self.user_id} used={self.is_used} revoked={self.is_revoked}>"
