"""Role and permission catalog endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from merchant_auth.api.context import require_identity
from merchant_auth.api.deps import json_response, require_permission, timing
from merchant_auth.schemas import PermissionSchema, RoleCreateSchema, RoleSchema
from merchant_auth.services import AccessService
from merchant_auth.services.access.dto import RoleCreateIn
from merchant_auth.services.access.service import ROLE_CREATE, ROLE_VIEW

roles_bp = Blueprint("roles", __name__)
permissions_bp = Blueprint("permissions", __name__)

role_schema = RoleSchema()
role_list_schema = RoleSchema(many=True)
role_create_schema = RoleCreateSchema()
permission_list_schema = PermissionSchema(many=True)


@roles_bp.get("")
@require_permission(ROLE_VIEW)
@timing
def list_roles():
    """Return merchant roles plus the shared system roles."""

    roles = AccessService().list_roles(require_identity())
    return json_response({"data": role_list_schema.dump(roles)})


@roles_bp.post("")
@require_permission(ROLE_CREATE)
@timing
def create_role():
    payload = role_create_schema.load(request.get_json(silent=True) or {})
    dto = RoleCreateIn(
        name=payload["name"],
        description=payload["description"],
        permissions=tuple(payload["permissions"]),
    )
    role = AccessService().create_role(require_identity(), dto)
    return json_response({"data": role_schema.dump(role)}, status=201)


@permissions_bp.get("")
@require_permission(ROLE_VIEW)
@timing
def list_permissions():
    return json_response({"data": permission_list_schema.dump(AccessService().list_permissions())})
