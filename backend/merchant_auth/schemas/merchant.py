"""Merchant Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields


class MerchantSchema(Schema):
    """Merchant profile returned by ``GET /merchants/me``."""

    id = fields.String()
    name = fields.String()
    phone = fields.String()
    timezone = fields.String()
    user_management_enabled = fields.Boolean()
    created_at = fields.DateTime()
