"""Merchant repository."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from merchant_auth.models.merchant import Merchant
from merchant_auth.repositories.base import BaseRepository


class MerchantRepository(BaseRepository[Merchant]):
    """Persistence-only repository for :class:`Merchant`."""

    model = Merchant

    def _updatable_fields(self):
        return {"name", "timezone", "pin_hash", "feature_flags"}

    def get_by_phone(self, phone: str) -> Merchant | None:
        """Fetch a merchant by its login phone number.

        :param phone: Phone number; surrounding whitespace is ignored.
        :returns: Merchant or ``None`` when not found.
        """
        stmt = select(Merchant).where(Merchant.phone == phone.strip())
        return cast(Merchant | None, self.session.execute(stmt).scalars().first())
