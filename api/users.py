from __future__ import annotations

from flask import Blueprint, request, jsonify, abort

from models import storage
from models.user import Role
from models.schemas.user import RoleUpdateSchema, UserOutSchema
from utils.decorators import get_auth_manager, roles_required

bp = Blueprint("users", __name__)

role_update_schema = RoleUpdateSchema()
user_out_schema = UserOutSchema()


@bp.put("/users/<user_id>/role")
@roles_required(Role.ADMIN.value)
def set_role(user_id: str, current_user):
    """
    Admin-only: change a user's role.
    Role checks read the stored user, so the change applies to the next request;
    the role claim inside access tokens updates when a new token is issued.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: path
         name: user_id
         type: string
         required: true
      -  in: body
         name: body
         schema:
           type: object
           properties:
             role: { type: string, enum: [Admin, Manager, Employee] }
    responses:
      200: { description: OK }
      403: { description: Insufficient role }
      404: { description: User not found }
    """
    data = role_update_schema.load(request.get_json(silent=True) or {})
    users = get_auth_manager().users
    user = users.get_by_id(user_id)
    if user is None:
        abort(404, description="User not found")
    if user.id == current_user.id and data["role"] != Role.ADMIN.value:
        abort(409, description="Admins cannot demote themselves")

    user.role = Role(data["role"])
    users.update(user)
    storage.save()
    return jsonify({"data": user_out_schema.dump(user)}), 200
