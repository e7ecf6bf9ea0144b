from marshmallow import Schema, fields, validate

from models.user import Role


class UserOutSchema(Schema):
    id = fields.String()
    full_name = fields.String()
    email = fields.String()
    role = fields.Function(lambda obj: obj.role.value if hasattr(obj.role, "value") else obj.role)


class RoleUpdateSchema(Schema):
    role = fields.String(required=True, validate=validate.OneOf([r.value for r in Role]))


class LoginOutSchema(Schema):
    access_token = fields.String()
    expires_at = fields.DateTime(format="iso")
    refresh_token = fields.String()
    user = fields.Nested(UserOutSchema)


class RefreshOutSchema(Schema):
    access_token = fields.String()
    expires_at = fields.DateTime(format="iso")
    refresh_token = fields.String()


class ForgotPasswordOutSchema(Schema):
    success = fields.Boolean()
    message = fields.String()
    reset_token = fields.String(allow_none=True)


class ResetPasswordOutSchema(Schema):
    success = fields.Boolean()
    message = fields.String()
