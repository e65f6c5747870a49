# tests/unit/services/test_access_service.py
from __future__ import annotations

import pytest

from merchant_auth.models import STATUS_INACTIVE
from merchant_auth.services._shared.context import RequestIdentity
from merchant_auth.services._shared.errors import AuthorizationError, ConflictError, ServiceError
from merchant_auth.services.access.dto import RoleCreateIn
from merchant_auth.services.access.service import USER_CREATE, USER_VIEW, AccessService
from tests.factories.merchant import MerchantFactory
from tests.factories.role import PermissionFactory, RoleFactory
from tests.factories.user import UserFactory


@pytest.fixture()
def service() -> AccessService:
    return AccessService()


@pytest.fixture()
def merchant():
    return MerchantFactory(user_management=True)


@pytest.fixture()
def viewer_role(merchant):
    view = PermissionFactory(code=USER_VIEW)
    return RoleFactory(merchant_id=merchant.id, name="Viewer", permissions=[view])


class TestEnsurePermission:
    def test_owner_holds_every_permission(self, service, merchant):
        owner = RequestIdentity(merchant_id=merchant.id)
        assert service.permissions_for(owner) is None
        service.ensure_permission(owner, USER_CREATE)

    def test_staff_with_granted_code(self, service, merchant, viewer_role):
        user = UserFactory(merchant_id=merchant.id, role_id=viewer_role.id)
        identity = RequestIdentity(merchant_id=merchant.id, user_id=user.id)

        service.ensure_permission(identity, USER_VIEW)
        with pytest.raises(AuthorizationError):
            service.ensure_permission(identity, USER_CREATE)

    def test_forwarded_role_label_is_not_trusted(self, service, merchant):
        user = UserFactory(merchant_id=merchant.id)
        identity = RequestIdentity(merchant_id=merchant.id, user_id=user.id, role="Owner")

        with pytest.raises(AuthorizationError):
            service.ensure_permission(identity, USER_VIEW)

    def test_inactive_user_has_no_permissions(self, service, merchant, viewer_role):
        user = UserFactory(merchant_id=merchant.id, role_id=viewer_role.id, status=STATUS_INACTIVE)
        identity = RequestIdentity(merchant_id=merchant.id, user_id=user.id)

        assert service.permissions_for(identity) == frozenset()

    def test_user_is_resolved_inside_the_identity_merchant(self, service, viewer_role):
        user = UserFactory(role_id=viewer_role.id)
        stranger = MerchantFactory()
        identity = RequestIdentity(merchant_id=stranger.id, user_id=user.id)

        with pytest.raises(AuthorizationError):
            service.ensure_permission(identity, USER_VIEW)


class TestRoles:
    def test_list_roles_includes_system_roles_but_not_foreign_ones(self, service, merchant, viewer_role):
        RoleFactory(merchant_id=None, name="Owner", is_system=True)
        RoleFactory(merchant_id=MerchantFactory().id, name="Foreign")

        names = {r.name for r in service.list_roles(RequestIdentity(merchant_id=merchant.id))}

        assert names == {"Viewer", "Owner"}

    def test_create_role_with_permissions(self, service, merchant):
        PermissionFactory(code=USER_VIEW)
        PermissionFactory(code=USER_CREATE)
        identity = RequestIdentity(merchant_id=merchant.id)

        role = service.create_role(
            identity, RoleCreateIn(name=" Supervisor ", permissions=(USER_VIEW, USER_CREATE))
        )

        assert role.name == "Supervisor"
        assert role.merchant_id == merchant.id
        assert role.is_system is False
        assert role.permissions == tuple(sorted((USER_VIEW, USER_CREATE)))

    def test_create_role_duplicate_name(self, service, merchant, viewer_role):
        with pytest.raises(ConflictError):
            service.create_role(RequestIdentity(merchant_id=merchant.id), RoleCreateIn(name="Viewer"))

    def test_create_role_unknown_permission(self, service, merchant):
        with pytest.raises(ServiceError):
            service.create_role(
                RequestIdentity(merchant_id=merchant.id),
                RoleCreateIn(name="Odd", permissions=("does.not.exist",)),
            )

    def test_list_permissions_is_the_catalog(self, service):
        PermissionFactory(code="b.second", module="b")
        PermissionFactory(code="a.first", module="a")

        codes = [p.code for p in service.list_permissions()]

        assert {"a.first", "b.second"} <= set(codes)
