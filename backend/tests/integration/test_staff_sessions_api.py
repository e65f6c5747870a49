"""Integration tests for staff login, refresh and logout over HTTP."""

from __future__ import annotations

import pytest

from merchant_auth.models import STATUS_INACTIVE
from tests.factories.merchant import MerchantFactory
from tests.factories.role import RoleFactory
from tests.factories.user import UserFactory
from tests.helpers.assertions import assert_no_secrets
from tests.helpers.http import identity_headers, post_json, problem_code

pytestmark = pytest.mark.integration

PASSWORD = "Shift-Start-1"


@pytest.fixture()
def merchant():
    return MerchantFactory(user_management=True)


@pytest.fixture()
def staff(merchant):
    role = RoleFactory(merchant_id=merchant.id, name="Cashier")
    return UserFactory(merchant_id=merchant.id, username="ines", password=PASSWORD, role_id=role.id)


def _login(client, merchant_id, username="ines", password=PASSWORD):
    return post_json(
        client, "/users/login", {"merchant_id": merchant_id, "username": username, "password": password}
    )


def test_login_returns_pair_and_profile(client, merchant, staff):
    resp = _login(client, merchant.id)

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["token_type"] == "Bearer"
    assert data["user"]["id"] == staff.id
    assert data["user"]["role"] == "Cashier"
    assert data["user"]["last_login_at"] is not None
    assert_no_secrets(data["user"])


def test_login_feature_disabled(client):
    merchant = MerchantFactory(user_management=False)
    UserFactory(merchant_id=merchant.id, username="ines", password=PASSWORD)

    resp = _login(client, merchant.id)

    assert resp.status_code == 403
    assert problem_code(resp) == "feature_disabled"


@pytest.mark.parametrize("case", ["wrong_password", "unknown_user", "inactive"])
def test_login_failures_are_uniform(client, merchant, staff, session, case):
    username, password = "ines", PASSWORD
    if case == "wrong_password":
        password = "nope-nope"
    elif case == "unknown_user":
        username = "ghost"
    else:
        staff.status = STATUS_INACTIVE
        session.commit()

    resp = _login(client, merchant.id, username=username, password=password)

    assert resp.status_code == 401
    assert problem_code(resp) == "invalid_credentials"
    assert resp.get_json()["detail"] == "Invalid credentials"


def test_refresh_dispatches_staff_tokens(client, merchant, staff):
    tokens = _login(client, merchant.id).get_json()["data"]

    resp = post_json(client, "/auth/refresh", {"refresh_token": tokens["refresh_token"]})

    assert resp.status_code == 200
    assert resp.get_json()["data"]["refresh_token"] != tokens["refresh_token"]


def test_logout_all_requires_staff_identity(client, merchant, staff):
    resp = post_json(client, "/users/logout-all", headers=identity_headers(merchant.id))
    assert resp.status_code == 401


def test_logout_all_revokes_staff_sessions(client, merchant, staff):
    tokens = _login(client, merchant.id).get_json()["data"]

    resp = post_json(client, "/users/logout-all", headers=identity_headers(merchant.id, staff.id))

    assert resp.status_code == 204
    assert post_json(client, "/auth/refresh", {"refresh_token": tokens["refresh_token"]}).status_code == 401


def test_logout_single_session(client, merchant, staff):
    a = _login(client, merchant.id).get_json()["data"]
    b = _login(client, merchant.id).get_json()["data"]
    headers = identity_headers(merchant.id, staff.id)

    assert post_json(client, "/users/logout", {"refresh_token": a["refresh_token"]}, headers).status_code == 204

    assert post_json(client, "/auth/refresh", {"refresh_token": a["refresh_token"]}).status_code == 401
    assert post_json(client, "/auth/refresh", {"refresh_token": b["refresh_token"]}).status_code == 200
