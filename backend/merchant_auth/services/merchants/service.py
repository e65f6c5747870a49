"""
MerchantService
===============

Read and provisioning operations on the ``Merchant`` aggregate. Login lives
in :mod:`merchant_auth.services.auth.service`.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from merchant_auth.models.merchant import FEATURE_USER_MANAGEMENT, Merchant
from merchant_auth.services._shared.base import BaseService
from merchant_auth.services._shared.context import RequestIdentity
from merchant_auth.services._shared.errors import ConflictError, NotFoundError, violates
from merchant_auth.services._shared.ports import CredentialHasher
from merchant_auth.services.merchants.dto import MerchantCreateIn, MerchantOut


def merchant_to_out(row: Merchant) -> MerchantOut:
    return MerchantOut(
        id=row.id,
        name=row.name,
        phone=row.phone,
        timezone=row.timezone,
        user_management_enabled=row.user_management_enabled,
        created_at=row.created_at,
    )


class MerchantService(BaseService):
    """Application service for the ``Merchant`` aggregate."""

    def __init__(self, *, hasher: CredentialHasher | None = None) -> None:
        super().__init__()
        self.hasher = hasher

    def get_current(self, identity: RequestIdentity) -> MerchantOut:
        """
        Return the profile of the merchant bound to the call identity.

        :raises NotFoundError: If the merchant no longer exists.
        """
        with self.ro_uow() as uow:
            merchant = uow.merchants.get(identity.merchant_id)
            if merchant is None:
                raise NotFoundError("Merchant", identity.merchant_id)
            return merchant_to_out(merchant)

    def create_merchant(self, dto: MerchantCreateIn) -> MerchantOut:
        """
        Provision a merchant with a hashed PIN.

        :raises ConflictError: If the phone number is already registered.
        """
        if self.hasher is None:
            raise RuntimeError("MerchantService.create_merchant requires a credential hasher")
        pin_hash = self.hasher.hash(dto.pin)
        with self.rw_uow() as uow:
            if uow.merchants.get_by_phone(dto.phone) is not None:
                raise ConflictError("Merchant", "phone already registered")
            merchant = Merchant(
                name=dto.name.strip(),
                phone=dto.phone,
                timezone=dto.timezone,
                pin_hash=pin_hash,
                feature_flags={FEATURE_USER_MANAGEMENT: bool(dto.user_management)},
            )
            try:
                uow.merchants.add(merchant)
            except IntegrityError as exc:
                if violates(exc, "uq_merchants_phone") or violates(exc, "merchants.phone"):
                    raise ConflictError("Merchant", "phone already registered") from exc
                raise
            merchant_id = merchant.id
        return self.get_current(RequestIdentity(merchant_id=merchant_id))
