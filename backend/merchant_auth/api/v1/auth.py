"""Token refresh endpoint shared by merchants and staff users."""

from __future__ import annotations

from flask import Blueprint, request

from merchant_auth.api.context import public_endpoint
from merchant_auth.api.deps import json_response, timing
from merchant_auth.core.security import get_components
from merchant_auth.schemas import RefreshTokenSchema, TokenPairSchema
from merchant_auth.services._shared.errors import InvalidCredentials, TokenError
from merchant_auth.services._shared.ports import REFRESH
from merchant_auth.services.auth.dto import RefreshIn

bp = Blueprint("auth", __name__)

refresh_schema = RefreshTokenSchema()
token_schema = TokenPairSchema()


@bp.post("/refresh")
@public_endpoint
@timing
def refresh():
    """Rotate a refresh token into a new access/refresh pair.

    The token's ``pt`` claim selects the merchant or staff session service;
    that service re-validates and performs the rotation.
    """

    data = refresh_schema.load(request.get_json(silent=True) or {})
    components = get_components()
    try:
        claims = components.token_issuer.validate(data["refresh_token"], expected_type=REFRESH)
        sessions = components.sessions_for(claims.principal_type)
    except (TokenError, ValueError) as exc:
        raise InvalidCredentials() from exc
    tokens = sessions.refresh(RefreshIn(refresh_token=data["refresh_token"]))
    return json_response({"data": token_schema.dump(tokens)})
