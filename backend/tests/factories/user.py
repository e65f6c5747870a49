"""Factory Boy definition for :class:`merchant_auth.models.User`."""

from __future__ import annotations

import factory

from merchant_auth.models import STATUS_ACTIVE, User
from tests.factories import FIXTURE_HASHER, BaseFactory
from tests.factories.merchant import MerchantFactory


class UserFactory(BaseFactory):
    """Build persisted staff users; pass ``merchant_id`` to pick the tenant."""

    class Meta:
        model = User

    class Params:
        password = "Passw0rd!"

    merchant_id = factory.LazyFunction(lambda: MerchantFactory(user_management=True).id)
    username = factory.Sequence(lambda n: f"staff{n}")
    email = factory.LazyAttribute(lambda o: f"{o.username}@example.com")
    full_name = factory.Faker("name")
    password_hash = factory.LazyAttribute(lambda o: FIXTURE_HASHER.hash(o.password))
    status = STATUS_ACTIVE
    role_id = None
