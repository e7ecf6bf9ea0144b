"""
Bearer-token guards for Flask views.

The authenticated user is passed to the view as the ``current_user`` keyword
argument instead of being stashed on ``flask.g``.
"""
from __future__ import annotations

from functools import wraps

from flask import request, abort, current_app

from services.errors import AuthMessages, AuthenticationError


def get_auth_manager():
    return current_app.extensions["auth_manager"]


def _bearer_token() -> str:
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        raise AuthenticationError(AuthMessages.INVALID_ACCESS_TOKEN)
    return auth.split(" ", 1)[1].strip()


def jwt_required():
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            manager = get_auth_manager()
            decoded = manager.issuer.decode(_bearer_token())
            user = manager.users.get_by_id(decoded.get("sub"))
            if not user:
                raise AuthenticationError(AuthMessages.USER_NOT_FOUND)
            kwargs["current_user"] = user
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def roles_required(*required_roles: str):
    """
    Allow access if the user's role is one of ``required_roles``; 403 otherwise.
    The role is read from the stored user, not the token, so demotions apply at once.
    """
    allowed = set(required_roles)

    def decorator(fn):
        @wraps(fn)
        @jwt_required()
        def wrapper(*args, **kwargs):
            user = kwargs["current_user"]
            role = user.role.value if hasattr(user.role, "value") else user.role
            if role not in allowed:
                abort(403, description="Insufficient role")
            return fn(*args, **kwargs)

        return wrapper

    return decorator
