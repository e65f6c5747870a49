# comments in English; reST docstrings
from __future__ import annotations

import hashlib
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime

import redis
from redis.exceptions import RedisError, WatchError

from merchant_auth.services._shared.errors import StorageError
from merchant_auth.services._shared.ports import (
    PrincipalType,
    RefreshTokenRecord,
    RefreshTokenStore,
)

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _b(value: bytes | str | None, default: str = "") -> str:
    if value is None:
        return default
    return value.decode() if isinstance(value, bytes | bytearray) else str(value)


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh token store.

    Layout:

    - ``rt:{sha256(token)}``: hash with the record fields, expiring with the token.
    - ``rt:p:{principal_id}``: set of token digests owned by a principal.

    The conditional revoke uses WATCH/MULTI/EXEC optimistic locking, so at
    most one concurrent caller flips an active record to revoked.

    :param r: A Redis client (already connected).
    :param clock: Source of "now" when the caller does not pass one.
    """

    r: redis.Redis
    clock: Callable[[], datetime] = field(default=_utcnow)

    # -------------------- helpers --------------------

    @staticmethod
    def _digest(token: str) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    @classmethod
    def _k(cls, token: str) -> str:
        return f"rt:{cls._digest(token)}"

    @staticmethod
    def _kd(digest: str) -> str:
        return f"rt:{digest}"

    @staticmethod
    def _kp(principal_id: str) -> str:
        return f"rt:p:{principal_id}"

    @staticmethod
    def _to_ts(dt: datetime) -> int:
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return int(dt.timestamp())

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except RedisError as exc:
            log.error("Redis refresh token store %s failed", operation, exc_info=True)
            raise StorageError(f"Refresh token store {operation} failed") from exc

    def _load(self, key: str) -> RefreshTokenRecord | None:
        h = self.r.hgetall(key)
        if not h:
            return None
        return RefreshTokenRecord(
            id=_b(h.get(b"id")),
            principal_id=_b(h.get(b"principal_id")),
            principal_type=PrincipalType(_b(h.get(b"principal_type"))),
            token=_b(h.get(b"token")),
            issued_at=datetime.fromtimestamp(int(_b(h.get(b"issued_at"), "0")), tz=UTC),
            expires_at=datetime.fromtimestamp(int(_b(h.get(b"expires_at"), "0")), tz=UTC),
            revoked=_b(h.get(b"revoked"), "0") == "1",
        )

    # -------------------- API ------------------------

    def create(self, record: RefreshTokenRecord) -> None:
        """Insert the record with a TTL matching the token expiry."""
        key = self._k(record.token)
        exp_ts = self._to_ts(record.expires_at)
        ttl = max(1, exp_ts - self._to_ts(self.clock()))
        with self._guard("create"):
            pipe = self.r.pipeline(transaction=True)
            pipe.hset(
                key,
                mapping={
                    "id": record.id,
                    "principal_id": record.principal_id,
                    "principal_type": PrincipalType(record.principal_type).value,
                    "token": record.token,
                    "issued_at": str(self._to_ts(record.issued_at)),
                    "expires_at": str(exp_ts),
                    "revoked": "1" if record.revoked else "0",
                },
            )
            pipe.expire(key, ttl)
            pipe.sadd(self._kp(record.principal_id), self._digest(record.token))
            pipe.execute()

    def find_active(self, token: str, *, now: datetime | None = None) -> RefreshTokenRecord | None:
        with self._guard("find_active"):
            record = self._load(self._k(token))
        if record is None or record.token != token:
            return None
        return record if record.is_active(now or self.clock()) else None

    def revoke_active(self, token: str, *, now: datetime | None = None) -> bool:
        """
        Flip ``revoked`` to ``1`` only while the record is active.

        Retries when another client touched the key between WATCH and EXEC.
        """
        key = self._k(token)
        now_ts = self._to_ts(now or self.clock())
        with self._guard("revoke_active"):
            while True:
                try:
                    with self.r.pipeline() as p:
                        p.watch(key)
                        h = p.hgetall(key)
                        if not h or _b(h.get(b"token")) != token:
                            p.unwatch()
                            return False
                        revoked = _b(h.get(b"revoked"), "0") == "1"
                        exp = int(_b(h.get(b"expires_at"), "0"))
                        if revoked or exp <= now_ts:
                            p.unwatch()
                            return False
                        p.multi()
                        p.hset(key, "revoked", "1")
                        p.execute()
                        return True
                except WatchError:
                    # Concurrent modification detected; re-read and decide again
                    continue

    def _revoke_key(self, key: str) -> bool:
        """
        Flip ``revoked`` to ``1`` when the record exists and is not revoked yet.

        Never recreates a key that expired or was purged in the meantime.
        """
        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(key)
                    current = p.hget(key, "revoked")
                    if current is None or _b(current) == "1":
                        p.unwatch()
                        return False
                    p.multi()
                    p.hset(key, "revoked", "1")
                    p.execute()
                    return True
            except WatchError:
                continue

    def revoke(self, token: str) -> None:
        with self._guard("revoke"):
            self._revoke_key(self._k(token))

    def revoke_all(self, principal_id: str) -> int:
        """
        Revoke every record indexed for ``principal_id``.

        Only the digests read here leave the index; a token created while the
        sweep runs stays indexed for the next call.
        """
        key_p = self._kp(principal_id)
        with self._guard("revoke_all"):
            digests = [_b(m) for m in self.r.smembers(key_p)]
            changed = sum(1 for digest in digests if self._revoke_key(self._kd(digest)))
            if digests:
                self.r.srem(key_p, *digests)
            return changed

    def purge_expired(self, now: datetime) -> int:
        """
        Delete records past expiry and prune principal indexes.

        Redis already evicts keys on TTL; this sweep catches records whose
        expiry passed before their TTL fired and drops dangling index members.
        """
        now_ts = self._to_ts(now)
        removed = 0
        with self._guard("purge_expired"):
            for key_p in self.r.scan_iter(match="rt:p:*"):
                stale: list[str] = []
                for member in self.r.smembers(key_p):
                    digest = _b(member)
                    key = self._kd(digest)
                    exp = self.r.hget(key, "expires_at")
                    if exp is None:
                        stale.append(digest)
                    elif int(_b(exp)) <= now_ts:
                        self.r.delete(key)
                        stale.append(digest)
                        removed += 1
                if stale:
                    self.r.srem(key_p, *stale)
        return removed
