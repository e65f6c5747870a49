"""Integration tests for the role and permission catalog endpoints."""

from __future__ import annotations

import pytest

from tests.factories.merchant import MerchantFactory
from tests.factories.role import PermissionFactory, RoleFactory
from tests.factories.user import UserFactory
from tests.helpers.http import API, identity_headers, post_json, problem_code

pytestmark = pytest.mark.integration


@pytest.fixture()
def merchant():
    return MerchantFactory()


def test_list_roles_includes_system_roles(client, merchant):
    RoleFactory(name="Shared", is_system=True)
    RoleFactory(merchant_id=merchant.id, name="Mine")
    RoleFactory(merchant_id=MerchantFactory().id, name="Theirs")

    resp = client.get(f"{API}/roles", headers=identity_headers(merchant.id))

    assert resp.status_code == 200
    names = {role["name"] for role in resp.get_json()["data"]}
    assert {"Shared", "Mine"} <= names
    assert "Theirs" not in names


def test_create_role(client, merchant):
    PermissionFactory(code="report.view", module="report")

    resp = post_json(
        client,
        "/roles",
        {"name": "Supervisor", "description": "Reads reports", "permissions": ["report.view"]},
        identity_headers(merchant.id),
    )

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["merchant_id"] == merchant.id
    assert data["is_system"] is False
    assert data["permissions"] == ["report.view"]


def test_create_role_duplicate_name(client, merchant):
    RoleFactory(merchant_id=merchant.id, name="Supervisor")

    resp = post_json(client, "/roles", {"name": "Supervisor"}, identity_headers(merchant.id))

    assert resp.status_code == 409


def test_create_role_unknown_permission(client, merchant):
    resp = post_json(client, "/roles", {"name": "Ghost", "permissions": ["nope.nope"]}, identity_headers(merchant.id))

    assert resp.status_code == 400
    assert problem_code(resp) == "bad_request"


def test_staff_without_role_view_cannot_list(client, merchant):
    staff = UserFactory(merchant_id=merchant.id)

    resp = client.get(f"{API}/permissions", headers=identity_headers(merchant.id, staff.id))

    assert resp.status_code == 403


def test_list_permissions(client, merchant):
    PermissionFactory(code="shift.open", module="shift")

    resp = client.get(f"{API}/permissions", headers=identity_headers(merchant.id))

    assert resp.status_code == 200
    assert "shift.open" in {p["code"] for p in resp.get_json()["data"]}
