"""Merchant session endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from merchant_auth.api.context import public_endpoint, require_identity
from merchant_auth.api.deps import json_response, no_content, timing
from merchant_auth.core.security import get_components
from merchant_auth.schemas import (
    MerchantLoginResponseSchema,
    MerchantLoginSchema,
    MerchantSchema,
    RefreshTokenSchema,
)
from merchant_auth.services import MerchantService
from merchant_auth.services.auth.dto import LogoutIn, MerchantLoginIn

bp = Blueprint("merchants", __name__)

login_schema = MerchantLoginSchema()
login_response_schema = MerchantLoginResponseSchema()
logout_schema = RefreshTokenSchema()
merchant_schema = MerchantSchema()


@bp.post("/login")
@public_endpoint
@timing
def login():
    """Authenticate a merchant by phone and PIN."""

    data = login_schema.load(request.get_json(silent=True) or {})
    result = get_components().merchant_sessions.login(MerchantLoginIn(**data))
    return json_response({"data": login_response_schema.dump(result)})


@bp.post("/logout")
@timing
def logout():
    data = logout_schema.load(request.get_json(silent=True) or {})
    get_components().merchant_sessions.logout(LogoutIn(**data))
    return no_content()


@bp.post("/logout-all")
@timing
def logout_all():
    """Revoke every session of the calling merchant."""

    identity = require_identity()
    get_components().merchant_sessions.logout_all(identity.merchant_id)
    return no_content()


@bp.get("/me")
@timing
def me():
    merchant = MerchantService().get_current(require_identity())
    return json_response({"data": merchant_schema.dump(merchant)})
