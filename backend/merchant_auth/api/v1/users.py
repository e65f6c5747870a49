"""Staff session and staff management endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from merchant_auth.api.context import public_endpoint, require_identity
from merchant_auth.api.deps import (
    json_response,
    no_content,
    parse_pagination,
    require_permission,
    timing,
)
from merchant_auth.core.errors import Unauthorized
from merchant_auth.core.security import get_components
from merchant_auth.schemas import (
    RefreshTokenSchema,
    StaffLoginResponseSchema,
    StaffLoginSchema,
    StaffUserSchema,
    UserCreateSchema,
    UserListQuerySchema,
    UserUpdateSchema,
    build_meta,
)
from merchant_auth.services import UserService
from merchant_auth.services.access.service import USER_CREATE, USER_UPDATE, USER_VIEW
from merchant_auth.services.auth.dto import LogoutIn, StaffLoginIn
from merchant_auth.services.users.dto import UserCreateIn, UserUpdateIn

bp = Blueprint("users", __name__)

login_schema = StaffLoginSchema()
login_response_schema = StaffLoginResponseSchema()
logout_schema = RefreshTokenSchema()
user_schema = StaffUserSchema()
user_list_schema = StaffUserSchema(many=True)
user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()
user_filter_schema = UserListQuerySchema()


def _user_service() -> UserService:
    components = get_components()
    return UserService(hasher=components.hasher, refresh_store=components.refresh_store)


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


@bp.post("/login")
@public_endpoint
@timing
def login():
    """Authenticate a staff user by username (or email) and password."""

    data = login_schema.load(request.get_json(silent=True) or {})
    dto = StaffLoginIn(merchant_id=data["merchant_id"], login=data["username"], password=data["password"])
    result = get_components().staff_sessions.login(dto)
    return json_response({"data": login_response_schema.dump(result)})


@bp.post("/logout")
@timing
def logout():
    data = logout_schema.load(request.get_json(silent=True) or {})
    get_components().staff_sessions.logout(LogoutIn(**data))
    return no_content()


@bp.post("/logout-all")
@timing
def logout_all():
    """Revoke every session of the calling staff user."""

    identity = require_identity()
    if identity.user_id is None:
        raise Unauthorized("A staff identity is required", code="unauthenticated")
    get_components().staff_sessions.logout_all(identity.user_id)
    return no_content()


# ---------------------------------------------------------------------------
# Management
# ---------------------------------------------------------------------------


@bp.get("")
@require_permission(USER_VIEW)
@timing
def list_users():
    """Return the paginated staff of the caller's merchant."""

    filters = user_filter_schema.load(request.args)
    pagination = parse_pagination()
    page = _user_service().list_users(
        require_identity(),
        page=pagination.page,
        limit=pagination.limit,
        sort=pagination.sort,
        status=filters["status"],
    )
    meta = build_meta(total=page.total, page=page.page, limit=page.limit)
    return json_response({"data": user_list_schema.dump(page.items), "meta": meta})


@bp.post("")
@require_permission(USER_CREATE)
@timing
def create_user():
    payload = user_create_schema.load(request.get_json(silent=True) or {})
    user = _user_service().create_user(require_identity(), UserCreateIn(**payload))
    return json_response({"data": user_schema.dump(user)}, status=201)


@bp.get("/<string:user_id>")
@require_permission(USER_VIEW)
@timing
def get_user(user_id: str):
    user = _user_service().get_user(require_identity(), user_id)
    return json_response({"data": user_schema.dump(user)})


@bp.patch("/<string:user_id>")
@require_permission(USER_UPDATE)
@timing
def update_user(user_id: str):
    """Partially update a staff user; ``role_id: null`` detaches the role."""

    payload = user_update_schema.load(request.get_json(silent=True) or {})
    clear_role = "role_id" in payload and payload["role_id"] is None
    dto = UserUpdateIn(
        full_name=payload.get("full_name"),
        role_id=payload.get("role_id"),
        clear_role=clear_role,
        status=payload.get("status"),
        password=payload.get("password"),
    )
    user = _user_service().update_user(require_identity(), user_id, dto)
    return json_response({"data": user_schema.dump(user)})
