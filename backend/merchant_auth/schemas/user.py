"""Staff user Marshmallow schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from merchant_auth.models.user import USER_STATUSES


class StaffSummarySchema(Schema):
    id = fields.String()
    username = fields.String()
    full_name = fields.String(allow_none=True)
    role = fields.String(allow_none=True)


class StaffUserSchema(Schema):
    """Public representation of a staff user."""

    id = fields.String()
    merchant_id = fields.String()
    username = fields.String()
    email = fields.String(allow_none=True)
    full_name = fields.String(allow_none=True)
    role_id = fields.String(allow_none=True)
    role = fields.String(allow_none=True)
    status = fields.String()
    last_login_at = fields.DateTime(allow_none=True)


class UserCreateSchema(Schema):
    """Input payload for creating a staff user."""

    username = fields.String(required=True, validate=validate.Length(min=3, max=50))
    password = fields.String(required=True, validate=validate.Length(min=8, max=128))
    email = fields.Email(load_default=None, allow_none=True, validate=validate.Length(max=254))
    full_name = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=100))
    role_id = fields.String(load_default=None, allow_none=True)


class UserUpdateSchema(Schema):
    """Partial update; an explicit ``role_id: null`` detaches the role."""

    full_name = fields.String(validate=validate.Length(max=100))
    role_id = fields.String(allow_none=True)
    status = fields.String(validate=validate.OneOf(USER_STATUSES))
    password = fields.String(validate=validate.Length(min=8, max=128))


class UserListQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    status = fields.String(load_default=None, validate=validate.OneOf(USER_STATUSES))
