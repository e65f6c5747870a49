"""Idempotent seeding of the permission catalog and shared system roles."""

from __future__ import annotations

import logging
from typing import Any, TypeVar, cast

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select
from sqlalchemy.orm import Session

from merchant_auth.models.role import Permission, Role
from merchant_auth.services.access.service import (
    ROLE_CREATE,
    ROLE_VIEW,
    USER_CREATE,
    USER_UPDATE,
    USER_VIEW,
)

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

PERMISSION_FIXTURES: list[dict[str, str]] = [
    {"code": USER_VIEW, "name": "View staff", "module": "users"},
    {"code": USER_CREATE, "name": "Create staff", "module": "users"},
    {"code": USER_UPDATE, "name": "Update staff", "module": "users"},
    {"code": ROLE_VIEW, "name": "View roles", "module": "roles"},
    {"code": ROLE_CREATE, "name": "Create roles", "module": "roles"},
]

SYSTEM_ROLE_FIXTURES: list[dict[str, Any]] = [
    {
        "name": "Owner",
        "description": "Full access to staff and role management",
        "permissions": [p["code"] for p in PERMISSION_FIXTURES],
    },
    {
        "name": "Cashier",
        "description": "Front-of-house staff",
        "permissions": [USER_VIEW],
    },
]


def _touch(summary: dict[str, dict[str, int]], table: str, created: bool) -> None:
    """Update summary counters for the given table."""
    entry = summary.setdefault(table, {"created": 0, "existing": 0})
    if created:
        entry["created"] += 1
    else:
        entry["existing"] += 1


def _get_or_create(
    session: Session,
    model: type[T],
    *,
    defaults: dict[str, Any] | None = None,
    **filters: Any,
) -> tuple[T, bool]:
    """Fetch ``model`` by ``filters`` or create it using ``defaults``."""
    instance = session.execute(select(model).filter_by(**filters)).scalar_one_or_none()
    if instance is not None:
        return instance, False
    params = dict(defaults or {})
    params.update(filters)
    instance = cast(T, model(**params))
    session.add(instance)
    return instance, True


def seed_permissions(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """
    Create missing permissions and system roles, then commit.

    Existing rows are left untouched except that a system role gains any
    catalog permission it is missing.
    """
    if verbose:
        LOGGER.info("Seeding permission catalog and system roles...")
    session = cast(Session, database.session)
    summary: dict[str, dict[str, int]] = {}

    by_code: dict[str, Permission] = {}
    for fixture in PERMISSION_FIXTURES:
        permission, created = _get_or_create(
            session,
            Permission,
            defaults={"name": fixture["name"], "module": fixture["module"]},
            code=fixture["code"],
        )
        by_code[permission.code] = permission
        _touch(summary, "permissions", created)
    session.flush()

    for fixture in SYSTEM_ROLE_FIXTURES:
        role, created = _get_or_create(
            session,
            Role,
            defaults={"description": fixture["description"], "is_system": True},
            merchant_id=None,
            name=fixture["name"],
        )
        granted = {p.code for p in role.permissions}
        for code in fixture["permissions"]:
            if code not in granted:
                role.permissions.append(by_code[code])
        _touch(summary, "roles", created)

    session.commit()
    return summary


__all__ = ["PERMISSION_FIXTURES", "SYSTEM_ROLE_FIXTURES", "seed_permissions"]
