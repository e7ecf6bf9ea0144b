"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout
- POST /auth/forgot-password
- POST /auth/reset-password
- GET  /auth/me

Views only parse input and serialise results; AuthSessionManager does the work
and raises typed errors that api.errors maps to HTTP statuses.
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, abort

from models import storage
from models.user import Role, User
from models.schemas.auth import (
    ForgotPasswordSchema,
    LoginSchema,
    LogoutSchema,
    RefreshTokenSchema,
    RegisterSchema,
    ResetPasswordSchema,
)
from models.schemas.user import (
    ForgotPasswordOutSchema,
    LoginOutSchema,
    RefreshOutSchema,
    ResetPasswordOutSchema,
    UserOutSchema,
)
from utils.decorators import get_auth_manager, jwt_required

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshTokenSchema()
logout_schema = LogoutSchema()
forgot_password_schema = ForgotPasswordSchema()
reset_password_schema = ResetPasswordSchema()

user_out_schema = UserOutSchema()
login_out_schema = LoginOutSchema()
refresh_out_schema = RefreshOutSchema()
forgot_password_out_schema = ForgotPasswordOutSchema()
reset_password_out_schema = ResetPasswordOutSchema()


def _payload() -> dict:
    return request.get_json(silent=True) or {}


@bp.post("/register")
def register():
    """
    Register a new employee account.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            full_name: { type: string }
            email: { type: string }
            password: { type: string }
    responses:
      201:
        description: Created
      409:
        description: Email already registered
      422:
        description: Validation error
    """
    data = register_schema.load(_payload())
    manager = get_auth_manager()

    if manager.users.get_by_email(data["email"]) is not None:
        abort(409, description="Email already registered")

    user = User(
        full_name=data["full_name"],
        email=data["email"],
        role=Role.EMPLOYEE,
        password_hash=manager.hasher.hash(data["password"]),
    )
    manager.users.add(user)
    storage.save()

    return jsonify({"data": user_out_schema.dump(user)}), 201


@bp.post("/login")
def login():
    """
    Login: returns an access token, its expiry and a refresh token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Invalid email or password
    """
    data = login_schema.load(_payload())
    result = get_auth_manager().login(data["email"], data["password"])
    return jsonify({"data": login_out_schema.dump(result)}), 200


@bp.post("/refresh")
def refresh():
    """
    Exchange a refresh token for a new access/refresh pair (rotation)
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refresh_token: { type: string }
             access_token: { type: string }
    responses:
      200:
        description: OK (returns new tokens)
      401:
        description: Expired, unknown, used or revoked refresh token
    """
    data = refresh_schema.load(_payload())
    result = get_auth_manager().refresh_session(data["refresh_token"], data["access_token"])
    return jsonify({"data": refresh_out_schema.dump(result)}), 200


@bp.post("/logout")
def logout():
    """
    Logout: revokes the refresh token. Unknown tokens are ignored.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refresh_token: { type: string }
    responses:
      204:
        description: ""
    """
    data = logout_schema.load(_payload())
    get_auth_manager().logout(data["refresh_token"])
    return ("", 204)


@bp.post("/forgot-password")
def forgot_password():
    """
    Request a password reset token. Always succeeds.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
    responses:
      200:
        description: OK
    """
    data = forgot_password_schema.load(_payload())
    result = get_auth_manager().forgot_password(data["email"])
    return jsonify({"data": forgot_password_out_schema.dump(result)}), 200


@bp.post("/reset-password")
def reset_password():
    """
    Set a new password with a reset token; revokes every session of the user.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             token: { type: string }
             new_password: { type: string }
             confirm_password: { type: string }
    responses:
      200:
        description: Password changed
      400:
        description: Invalid or expired token
    """
    data = reset_password_schema.load(_payload())
    result = get_auth_manager().reset_password(data["token"], data["new_password"], data["confirm_password"])
    status = 200 if result.success else 400
    return jsonify({"data": reset_password_out_schema.dump(result)}), status


@bp.get("/me")
@jwt_required()
def me(current_user):
    """
    Get the authenticated user
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return jsonify({"data": user_out_schema.dump(current_user)}), 200
