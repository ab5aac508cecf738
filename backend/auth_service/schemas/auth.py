"""Authentication-related Marshmallow schemas.

Wire names are camelCase (``firstName``); attribute names stay snake_case.
"""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, pre_load, validate


class _TrimmedInputSchema(Schema):
    """Strip surrounding whitespace from every string field except passwords."""

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def _strip(self, data: Any, **_: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {
            key: value.strip() if isinstance(value, str) and key != "password" else value
            for key, value in data.items()
        }


class RegisterSchema(_TrimmedInputSchema):
    """Input payload for account registration."""

    first_name = fields.String(
        required=True,
        data_key="firstName",
        validate=validate.Length(min=1, max=100, error="First name is required"),
    )
    last_name = fields.String(
        required=True,
        data_key="lastName",
        validate=validate.Length(min=1, max=100, error="Last name is required"),
    )
    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(
        required=True,
        validate=validate.Length(
            min=8, max=128, error="Password must be at least 8 characters long"
        ),
    )


class LoginSchema(_TrimmedInputSchema):
    """Input payload for authenticating a user."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(
        required=True,
        validate=validate.Length(min=1, max=128, error="Password is required"),
    )


class AuthResultSchema(Schema):
    """Response payload for register and login: the user id only."""

    id = fields.Integer(required=True, attribute="user_id")


class UserPublicSchema(Schema):
    """Public profile returned by ``GET /auth/self``."""

    id = fields.Integer(required=True)
    first_name = fields.String(required=True, data_key="firstName")
    last_name = fields.String(required=True, data_key="lastName")
    email = fields.Email(required=True)
    role = fields.Function(lambda user: str(user.role))
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)
