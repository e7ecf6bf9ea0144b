"""
Request schemas for the auth endpoints.
These enforce shape and format only; semantic checks live in AuthSessionManager.
"""
import re

from marshmallow import Schema, fields, pre_load, validate, validates, validates_schema, ValidationError

PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]")
PASSWORD_RULES = (
    "Password must contain at least one uppercase letter, one lowercase letter, "
    "one digit, and one special character"
)


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


def check_password_strength(value: str) -> None:
    if len(value) < 6:
        raise ValidationError("Password must be at least 6 characters long")
    if len(value) > 100:
        raise ValidationError("Password cannot exceed 100 characters")
    if not PASSWORD_PATTERN.match(value):
        raise ValidationError(PASSWORD_RULES)


class EmailSchema(Schema):
    email = fields.Email(required=True, validate=validate.Length(max=100, error="Email cannot exceed 100 characters"))

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data, email=_norm_email(data["email"]))
        return data


class LoginSchema(EmailSchema):
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1, max=100))


class RegisterSchema(EmailSchema):
    full_name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    password = fields.String(required=True, load_only=True)

    @validates("password")
    def validate_password(self, value, **kwargs):
        check_password_strength(value)


class ForgotPasswordSchema(EmailSchema):
    pass


class RefreshTokenSchema(Schema):
    refresh_token = fields.String(
        required=True, validate=validate.Length(min=1, max=500, error="Refresh token cannot exceed 500 characters")
    )
    access_token = fields.String(
        required=True, validate=validate.Length(min=1, max=1000, error="Access token cannot exceed 1000 characters")
    )


class LogoutSchema(Schema):
    refresh_token = fields.String(required=True, validate=validate.Length(min=1, max=500))


class ResetPasswordSchema(Schema):
    token = fields.String(
        required=True, validate=validate.Length(min=1, max=500, error="Reset token cannot exceed 500 characters")
    )
    new_password = fields.String(required=True, load_only=True)
    confirm_password = fields.String(required=True, load_only=True)

    @validates("new_password")
    def validate_new_password(self, value, **kwargs):
        check_password_strength(value)

    @validates_schema
    def validate_confirmation(self, data, **kwargs):
        if "new_password" in data and data.get("confirm_password") != data["new_password"]:
            raise ValidationError("Passwords do not match", field_name="confirm_password")
