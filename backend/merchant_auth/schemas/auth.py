"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from merchant_auth.schemas.user import StaffSummarySchema, StaffUserSchema


class MerchantLoginSchema(Schema):
    """Input payload for a merchant login."""

    phone = fields.String(required=True, validate=validate.Length(min=3, max=32))
    pin = fields.String(required=True, validate=validate.Length(min=4, max=12))


class StaffLoginSchema(Schema):
    """Input payload for a staff login; ``username`` also accepts the email."""

    merchant_id = fields.String(required=True, validate=validate.Length(min=1, max=36))
    username = fields.String(required=True, validate=validate.Length(min=1, max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RefreshTokenSchema(Schema):
    """Input payload carrying a refresh token (refresh and logout)."""

    refresh_token = fields.String(required=True, validate=validate.Length(min=1, max=1024))


class TokenPairSchema(Schema):
    """Response payload with a token pair."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.String(dump_default="Bearer")


class MerchantLoginResponseSchema(Schema):
    """Response payload of a merchant login."""

    access_token = fields.String(attribute="tokens.access_token")
    refresh_token = fields.String(attribute="tokens.refresh_token")
    token_type = fields.String(attribute="tokens.token_type")
    user_management_enabled = fields.Boolean()
    staff = fields.List(fields.Nested(StaffSummarySchema))


class StaffLoginResponseSchema(Schema):
    """Response payload of a staff login."""

    access_token = fields.String(attribute="tokens.access_token")
    refresh_token = fields.String(attribute="tokens.refresh_token")
    token_type = fields.String(attribute="tokens.token_type")
    user = fields.Nested(StaffUserSchema)
