"""
User lookups consumed by the auth core.
"""
from __future__ import annotations

from typing import Optional

from models.user import User


class UserDirectory:
    def __init__(self, storage):
        self.storage = storage

    def get_by_id(self, user_id: str) -> Optional[User]:
        if not user_id:
            return None
        return self.storage.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        if not email:
            return None
        session = self.storage.get_session()
        return session.query(User).filter(User.email == email.strip().lower()).first()

    def add(self, user: User) -> User:
        self.storage.new(user)
        return user

    def update(self, user: User) -> User:
        """Stage changes to an existing user; the caller commits."""
        self.storage.new(user)
        return user
