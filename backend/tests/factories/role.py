"""Factories for roles and permissions."""

from __future__ import annotations

import factory

from merchant_auth.models import Permission, Role
from tests.factories import BaseFactory


class PermissionFactory(BaseFactory):
    class Meta:
        model = Permission

    code = factory.Sequence(lambda n: f"test.perm{n}")
    name = factory.LazyAttribute(lambda o: o.code.replace(".", " ").title())
    module = "test"


class RoleFactory(BaseFactory):
    """Build roles; ``merchant_id=None`` yields a shared system role."""

    class Meta:
        model = Role

    merchant_id = None
    name = factory.Sequence(lambda n: f"Role {n}")
    description = None
    is_system = False
    permissions = factory.LazyFunction(list)
