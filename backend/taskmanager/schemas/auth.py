"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import fields, validate

from taskmanager.schemas.common import BaseSchema, TrimmedSchema, UTCDateTime


class RegisterSchema(TrimmedSchema):
    """Input payload for account registration."""

    TRIM_FIELDS = ("name", "email")

    name = fields.String(required=True, validate=validate.Length(min=3, max=100))
    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=6, max=128))


class LoginSchema(BaseSchema):
    """Input payload for authenticating a user."""

    email = fields.String(required=True, validate=validate.Length(min=1, max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RefreshTokenSchema(BaseSchema):
    """Input payload for ``/auth/refresh-token``; emptiness is checked by the service."""

    refresh_token = fields.String(data_key="refreshToken", load_default=None, allow_none=True)


class UserPublicSchema(BaseSchema):
    """Public projection of a user."""

    id = fields.Integer()
    name = fields.String()
    email = fields.Email()
    created_at = UTCDateTime(data_key="createdAt")


class TokenPairSchema(BaseSchema):
    access_token = fields.String(data_key="accessToken")
    refresh_token = fields.String(data_key="refreshToken")


class AccessTokenSchema(BaseSchema):
    access_token = fields.String(data_key="accessToken")
