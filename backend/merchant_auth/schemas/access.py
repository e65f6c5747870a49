"""Role and permission Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class PermissionSchema(Schema):
    code = fields.String()
    name = fields.String()
    description = fields.String(allow_none=True)
    module = fields.String()


class RoleSchema(Schema):
    id = fields.String()
    merchant_id = fields.String(allow_none=True)
    name = fields.String()
    description = fields.String(allow_none=True)
    is_system = fields.Boolean()
    permissions = fields.List(fields.String())


class RoleCreateSchema(Schema):
    """Input payload for creating a merchant role."""

    name = fields.String(required=True, validate=validate.Length(min=1, max=64))
    description = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=255))
    permissions = fields.List(fields.String(), load_default=list)
