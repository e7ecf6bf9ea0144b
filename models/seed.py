"""
Demo accounts for local development (python -m api --seed).
"""
from __future__ import annotations

import logging

from models.user import Role, User

logger = logging.getLogger(__name__)

DEFAULT_USERS = (
    ("Admin User", "admin@demo.com", Role.ADMIN, "Admin123!"),
    ("Manager User", "manager@demo.com", Role.MANAGER, "Manager123!"),
    ("Employee User", "employee@demo.com", Role.EMPLOYEE, "Employee123!"),
)


def seed_default_users(storage, users, hasher) -> int:
    """Create the demo accounts that do not exist yet; returns how many were added."""
    created = 0
    for full_name, email, role, password in DEFAULT_USERS:
        if users.get_by_email(email) is not None:
            continue
        users.add(User(full_name=full_name, email=email, role=role, password_hash=hasher.hash(password)))
        created += 1
    if created:
        storage.save()
        logger.info("Seeded %d demo users", created)
    return created
