from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from enum import Enum
from typing import Protocol
from uuid import uuid4


class PrincipalType(str, Enum):
    """Kind of account a refresh token was issued to."""

    MERCHANT = "merchant"
    USER = "user"


@dataclass(frozen=True, slots=True)
class RefreshTokenRecord:
    """
    Server-side record of one refresh token issuance.

    :ivar id: Unique record identifier (generated by :meth:`RefreshTokenStore.new_id`).
    :ivar principal_id: Merchant id or staff user id owning the token.
    :ivar principal_type: Which session service issued the token.
    :ivar token: The signed refresh token string handed to the client.
    :ivar issued_at: Issuance instant (UTC).
    :ivar expires_at: Absolute expiration (UTC).
    :ivar revoked: Terminal revocation flag.
    """

    id: str
    principal_id: str
    principal_type: PrincipalType
    token: str
    issued_at: datetime
    expires_at: datetime
    revoked: bool = False

    def is_active(self, now: datetime) -> bool:
        """Return ``True`` when the record is neither revoked nor expired at ``now``."""
        return not self.revoked and self.expires_at > now


class RefreshTokenStore(Protocol):
    """
    Durable store of refresh token records.

    Every operation may raise :class:`~merchant_auth.services._shared.errors.StorageError`.
    ``revoke_active`` MUST be atomic: among concurrent callers presenting the
    same active token, exactly one observes ``True``.
    """

    def create(self, record: RefreshTokenRecord) -> None:
        """Persist a new active record. The caller guarantees id uniqueness."""

    def find_active(self, token: str, *, now: datetime | None = None) -> RefreshTokenRecord | None:
        """Return the record only when it is active; every other state reads as ``None``."""

    def revoke_active(self, token: str, *, now: datetime | None = None) -> bool:
        """Revoke the record if, and only if, it is still active. :returns: True if this call won."""

    def revoke(self, token: str) -> None:
        """Mark the matching record revoked regardless of state. Idempotent."""

    def revoke_all(self, principal_id: str) -> int:
        """
        Revoke every record owned by ``principal_id``. Idempotent.

        :returns: Number of records that changed state.
        """

    def purge_expired(self, now: datetime) -> int:
        """Delete records whose expiry is at or before ``now``. :returns: Rows removed."""

    def new_id(self) -> str:
        """Generate a new random record identifier."""
        return uuid4().hex


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    In-memory refresh token store.

    .. note::
       Uses a threading lock so the conditional revoke is atomic across threads.
    """

    def __init__(self) -> None:
        self._by_token: dict[str, RefreshTokenRecord] = {}
        self._seq = 0
        self._lock = threading.Lock()

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)

    def new_id(self) -> str:
        """Generate a sequential id controlled by the store."""
        with self._lock:
            self._seq += 1
            return f"rt-{self._seq}"

    def create(self, record: RefreshTokenRecord) -> None:
        with self._lock:
            self._by_token[record.token] = record

    def find_active(self, token: str, *, now: datetime | None = None) -> RefreshTokenRecord | None:
        now = now or self._now()
        with self._lock:
            record = self._by_token.get(token)
        if record is None or not record.is_active(now):
            return None
        return record

    def revoke_active(self, token: str, *, now: datetime | None = None) -> bool:
        now = now or self._now()
        with self._lock:
            record = self._by_token.get(token)
            if record is None or not record.is_active(now):
                return False
            self._by_token[token] = replace(record, revoked=True)
            return True

    def revoke(self, token: str) -> None:
        with self._lock:
            record = self._by_token.get(token)
            if record is not None and not record.revoked:
                self._by_token[token] = replace(record, revoked=True)

    def revoke_all(self, principal_id: str) -> int:
        with self._lock:
            changed = 0
            for token, record in list(self._by_token.items()):
                if record.principal_id == principal_id and not record.revoked:
                    self._by_token[token] = replace(record, revoked=True)
                    changed += 1
            return changed

    def purge_expired(self, now: datetime) -> int:
        with self._lock:
            expired = [t for t, r in self._by_token.items() if r.expires_at <= now]
            for token in expired:
                del self._by_token[token]
            return len(expired)

    def get(self, token: str) -> RefreshTokenRecord | None:
        """Return the raw record in any state (test helper)."""
        with self._lock:
            return self._by_token.get(token)
