"""Factory Boy definition for :class:`merchant_auth.models.Merchant`."""

from __future__ import annotations

import factory

from merchant_auth.models import FEATURE_USER_MANAGEMENT, Merchant
from tests.factories import FIXTURE_HASHER, BaseFactory


class MerchantFactory(BaseFactory):
    """
    Build persisted merchants.

    ``pin`` is hashed into ``pin_hash``; ``user_management`` toggles the
    staff-login feature flag.
    """

    class Meta:
        model = Merchant

    class Params:
        pin = "1234"
        user_management = False

    name = factory.Faker("company")
    phone = factory.Sequence(lambda n: f"+3460000{n:04d}")
    timezone = "UTC"
    pin_hash = factory.LazyAttribute(lambda o: FIXTURE_HASHER.hash(o.pin))
    feature_flags = factory.LazyAttribute(lambda o: {FEATURE_USER_MANAGEMENT: o.user_management})
