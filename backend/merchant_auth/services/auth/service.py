# merchant_auth/services/auth/service.py
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any, ClassVar

from merchant_auth.services._shared.base import BaseService
from merchant_auth.services._shared.errors import (
    FeatureDisabled,
    InactivePrincipal,
    InvalidCredentials,
    PrincipalNotFound,
    ServiceError,
    TokenError,
)
from merchant_auth.services._shared.ports import (
    REFRESH,
    CredentialHasher,
    PrincipalType,
    RefreshTokenRecord,
    RefreshTokenStore,
    TokenIssuer,
)
from merchant_auth.services.auth.dto import (
    LogoutIn,
    MerchantLoginIn,
    MerchantLoginOut,
    RefreshIn,
    StaffLoginIn,
    StaffLoginOut,
    TokenPairOut,
)
from merchant_auth.services.users._converters import user_to_out, user_to_summary

log = logging.getLogger(__name__)


class SessionService(BaseService):
    """
    Session lifecycle shared by both principal types (logout / logout-all / refresh).

    Subclasses set :attr:`principal_type`, implement ``login`` and may add
    claims or re-checks at refresh time through :meth:`_claims_for_refresh`.

    Refresh rotation is revoke-then-issue: the presented token is
    conditionally revoked first, so at most one of several concurrent callers
    gets a new pair, and a failure after the revoke leaves the old token dead.
    """

    principal_type: ClassVar[PrincipalType]

    def __init__(
        self,
        *,
        token_issuer: TokenIssuer,
        refresh_store: RefreshTokenStore,
        hasher: CredentialHasher,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param token_issuer: Signs and validates session tokens.
        :param refresh_store: Durable refresh token records.
        :param hasher: Verifies PINs and passwords.
        :param clock: Optional source of "now" (defaults to UTC wall clock).
        """
        super().__init__()
        self.tokens = token_issuer
        self.refresh_store = refresh_store
        self.hasher = hasher
        self._clock = clock

    def now_utc(self) -> datetime:
        return self._clock() if self._clock is not None else BaseService.now_utc()

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> None:
        """Revoke a single refresh token. Unknown or inactive tokens are a no-op."""
        self.refresh_store.revoke(dto.refresh_token)

    def logout_all(self, principal_id: str) -> int:
        """
        Revoke every refresh token of ``principal_id``.

        :returns: Number of records that were still unrevoked.
        """
        count = self.refresh_store.revoke_all(principal_id)
        log.info(
            "Logged out of all devices",
            extra={"principal_type": self.principal_type.value, self._id_key: principal_id},
        )
        return count

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange an active refresh token for a new pair.

        :raises InvalidCredentials: If the token is malformed, not active, owned
            by the other principal type, or lost a concurrent rotation.
        :raises StorageError: If the store fails; a completed revoke is not undone.
        """
        token = dto.refresh_token
        try:
            claims = self.tokens.validate(token, expected_type=REFRESH)
        except TokenError as exc:
            raise self._reject(InvalidCredentials(), detail="refresh_token_invalid") from exc

        now = self.now_utc()
        record = self.refresh_store.find_active(token, now=now)
        if (
            record is None
            or record.principal_type != self.principal_type
            or record.principal_id != claims.subject
        ):
            raise self._reject(InvalidCredentials(), detail="refresh_token_inactive")

        if not self.refresh_store.revoke_active(token, now=now):
            raise self._reject(
                InvalidCredentials(), detail="refresh_token_raced", principal_id=record.principal_id
            )

        extra = self._claims_for_refresh(record.principal_id)
        return self._issue_pair(record.principal_id, extra)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    @property
    def _id_key(self) -> str:
        return "merchant_id" if self.principal_type is PrincipalType.MERCHANT else "user_id"

    def _claims_for_refresh(self, principal_id: str) -> dict[str, Any]:
        """Re-check the principal and return extra access-token claims."""
        return {}

    def _issue_pair(self, principal_id: str, extra: dict[str, Any] | None = None) -> TokenPairOut:
        """Sign a new access/refresh pair and persist the refresh record."""
        pt = self.principal_type.value
        access = self.tokens.issue_access(principal_id, principal_type=pt, extra_claims=extra)
        refresh = self.tokens.issue_refresh(principal_id, principal_type=pt, extra_claims=extra)
        issued_at = self.now_utc()
        self.refresh_store.create(
            RefreshTokenRecord(
                id=self.refresh_store.new_id(),
                principal_id=principal_id,
                principal_type=self.principal_type,
                token=refresh,
                issued_at=issued_at,
                expires_at=issued_at + self.tokens.refresh_ttl,
            )
        )
        return TokenPairOut(access_token=access, refresh_token=refresh)

    def _reject(
        self, err: ServiceError, *, principal_id: str | None = None, detail: str | None = None
    ) -> ServiceError:
        """Log the internal failure kind and hand the error back for raising."""
        extra: dict[str, Any] = {
            "principal_type": self.principal_type.value,
            "reason": detail or getattr(err, "reason", err.__class__.__name__),
        }
        if principal_id is not None:
            extra[self._id_key] = principal_id
        log.warning("Authentication rejected", extra=extra)
        return err


class MerchantSessionService(SessionService):
    """Sessions of merchant (tenant) accounts: phone + PIN."""

    principal_type = PrincipalType.MERCHANT

    def login(self, dto: MerchantLoginIn) -> MerchantLoginOut:
        """
        Authenticate a merchant and issue a fresh token pair.

        :param dto: Login input.
        :returns: Token pair, feature flag and the active staff list.
        :raises PrincipalNotFound: If no merchant owns the phone number.
        :raises InvalidCredentials: If the PIN does not match.
        """
        with self.ro_uow() as uow:
            merchant = uow.merchants.get_by_phone(dto.phone)
            if merchant is None:
                raise self._reject(PrincipalNotFound())
            merchant_id = merchant.id
            pin_hash = merchant.pin_hash
            user_management = merchant.user_management_enabled

        if not self.hasher.verify(pin_hash, dto.pin):
            raise self._reject(InvalidCredentials(), principal_id=merchant_id)

        staff: tuple = ()
        if user_management:
            with self.ro_uow() as uow:
                staff = tuple(
                    user_to_summary(u) for u in uow.users.list_active_for_merchant(merchant_id)
                )

        tokens = self._issue_pair(merchant_id)
        log.info("Merchant logged in", extra={"merchant_id": merchant_id, "principal_type": "merchant"})
        return MerchantLoginOut(
            tokens=tokens, user_management_enabled=user_management, staff=staff
        )

    def _claims_for_refresh(self, principal_id: str) -> dict[str, Any]:
        with self.ro_uow() as uow:
            if uow.merchants.get(principal_id) is None:
                raise self._reject(PrincipalNotFound(), principal_id=principal_id)
        return {}


class StaffSessionService(SessionService):
    """Sessions of staff users: merchant id + username-or-email + password."""

    principal_type = PrincipalType.USER

    def login(self, dto: StaffLoginIn) -> StaffLoginOut:
        """
        Authenticate a staff user and issue a fresh token pair.

        Checks run in order: merchant exists, user management enabled, user
        exists in that merchant, user is active, password matches.

        :raises PrincipalNotFound: Unknown merchant or user.
        :raises FeatureDisabled: The merchant has user management switched off.
        :raises InactivePrincipal: The user is not active.
        :raises InvalidCredentials: Wrong password.
        """
        with self.ro_uow() as uow:
            merchant = uow.merchants.get(dto.merchant_id)
            if merchant is None:
                raise self._reject(PrincipalNotFound())
            merchant_id = merchant.id
            if not merchant.user_management_enabled:
                raise self._reject(FeatureDisabled())
            user = uow.users.get_by_login(merchant_id, dto.login)
            if user is None:
                raise self._reject(PrincipalNotFound())
            user_id = user.id
            if not user.is_active:
                raise self._reject(InactivePrincipal(), principal_id=user_id)
            password_hash = user.password_hash

        if not self.hasher.verify(password_hash, dto.password):
            raise self._reject(InvalidCredentials(), principal_id=user_id)

        now = self.now_utc()
        with self.rw_uow() as uow:
            user = uow.users.get_in_merchant(merchant_id, user_id)
            if user is None:
                raise self._reject(PrincipalNotFound(), principal_id=user_id)
            uow.users.touch_last_login(user, now)
            user_out = user_to_out(user)

        tokens = self._issue_pair(user_id, self._staff_claims(merchant_id, user_out.role))
        log.info(
            "Staff user logged in",
            extra={"merchant_id": merchant_id, "user_id": user_id, "principal_type": "user"},
        )
        return StaffLoginOut(tokens=tokens, user=user_out)

    @staticmethod
    def _staff_claims(merchant_id: str, role: str | None) -> dict[str, Any]:
        return {"merchant_id": merchant_id, "role": role}

    def _claims_for_refresh(self, principal_id: str) -> dict[str, Any]:
        with self.ro_uow() as uow:
            user = uow.users.get(principal_id)
            if user is None:
                raise self._reject(PrincipalNotFound(), principal_id=principal_id)
            if not user.is_active:
                raise self._reject(InactivePrincipal(), principal_id=principal_id)
            merchant = uow.merchants.get(user.merchant_id)
            if merchant is None or not merchant.user_management_enabled:
                raise self._reject(FeatureDisabled(), principal_id=principal_id)
            return self._staff_claims(user.merchant_id, user.role.name if user.role else None)
