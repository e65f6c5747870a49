"""Tests for the permission catalog seed."""

from __future__ import annotations

from sqlalchemy import select

from merchant_auth.models import Permission, Role
from merchant_auth.seeds.permissions import PERMISSION_FIXTURES, SYSTEM_ROLE_FIXTURES, seed_permissions
from tests.factories.role import RoleFactory


def test_seed_creates_catalog_and_system_roles(db, session):
    summary = seed_permissions(db)

    assert summary["permissions"] == {"created": len(PERMISSION_FIXTURES), "existing": 0}
    assert summary["roles"] == {"created": len(SYSTEM_ROLE_FIXTURES), "existing": 0}

    owner = session.execute(select(Role).where(Role.name == "Owner", Role.merchant_id.is_(None))).scalar_one()
    assert owner.is_system
    assert owner.permission_codes == frozenset(p["code"] for p in PERMISSION_FIXTURES)


def test_seed_is_idempotent(db, session):
    seed_permissions(db)
    summary = seed_permissions(db)

    assert summary["permissions"]["created"] == 0
    assert summary["roles"] == {"created": 0, "existing": len(SYSTEM_ROLE_FIXTURES)}
    codes = session.execute(select(Permission.code)).scalars().all()
    assert len(codes) == len(set(codes))


def test_seed_completes_existing_system_role(db, session):
    RoleFactory(name="Cashier", is_system=True)

    seed_permissions(db)

    cashier = session.execute(select(Role).where(Role.name == "Cashier", Role.merchant_id.is_(None))).scalar_one()
    assert "user.view" in cashier.permission_codes
