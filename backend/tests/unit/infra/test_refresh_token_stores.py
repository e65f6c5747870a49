"""
Behavioural tests shared by every refresh token store.

The same scenarios run against the in-memory store, the relational store
(transactional SQLite session) and the Redis store (fakeredis).
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import fakeredis
import pytest

from merchant_auth.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
from merchant_auth.infra.sqlalchemy.refresh_token_store import SQLRefreshTokenStore
from merchant_auth.services._shared.ports import (
    InMemoryRefreshTokenStore,
    PrincipalType,
    RefreshTokenRecord,
)


def _now() -> datetime:
    return datetime.now(UTC).replace(microsecond=0)


@pytest.fixture(params=["memory", "sql", "redis"])
def store(request, session):
    if request.param == "memory":
        return InMemoryRefreshTokenStore()
    if request.param == "sql":
        return SQLRefreshTokenStore()
    return RedisRefreshTokenStore(r=fakeredis.FakeRedis())


def _record(store, token: str, *, principal_id: str = "p-1", lifetime=timedelta(hours=1), **kw):
    now = _now()
    return RefreshTokenRecord(
        id=store.new_id(),
        principal_id=principal_id,
        principal_type=kw.pop("principal_type", PrincipalType.MERCHANT),
        token=token,
        issued_at=now,
        expires_at=now + lifetime,
        **kw,
    )


def test_created_record_is_found_active(store):
    store.create(_record(store, "tok-a", principal_id="m-1"))

    found = store.find_active("tok-a")

    assert found is not None
    assert found.principal_id == "m-1"
    assert found.principal_type is PrincipalType.MERCHANT
    assert found.revoked is False


def test_unknown_token_reads_as_none(store):
    assert store.find_active("missing") is None


def test_expired_record_reads_as_none(store):
    store.create(_record(store, "tok-a"))
    assert store.find_active("tok-a", now=_now() + timedelta(hours=2)) is None


def test_revoke_active_wins_once(store):
    store.create(_record(store, "tok-a"))

    assert store.revoke_active("tok-a") is True
    assert store.revoke_active("tok-a") is False
    assert store.find_active("tok-a") is None


def test_revoke_active_refuses_expired_and_unknown(store):
    store.create(_record(store, "tok-a"))
    assert store.revoke_active("tok-a", now=_now() + timedelta(hours=2)) is False
    assert store.revoke_active("nope") is False


def test_revoke_is_idempotent_and_tolerates_unknown_tokens(store):
    store.create(_record(store, "tok-a"))

    store.revoke("tok-a")
    store.revoke("tok-a")
    store.revoke("never-issued")

    assert store.find_active("tok-a") is None


def test_revoke_all_only_touches_one_principal(store):
    store.create(_record(store, "tok-a", principal_id="m-1"))
    store.create(_record(store, "tok-b", principal_id="m-1"))
    store.create(_record(store, "tok-c", principal_id="m-2"))

    assert store.revoke_all("m-1") == 2
    assert store.revoke_all("m-1") == 0

    assert store.find_active("tok-a") is None
    assert store.find_active("tok-b") is None
    assert store.find_active("tok-c") is not None


def test_revoke_all_skips_already_revoked_records(store):
    store.create(_record(store, "tok-a", principal_id="m-1"))
    store.create(_record(store, "tok-b", principal_id="m-1"))
    store.revoke("tok-a")

    assert store.revoke_all("m-1") == 1


def test_principal_type_round_trips(store):
    store.create(_record(store, "tok-u", principal_id="u-1", principal_type=PrincipalType.USER))
    assert store.find_active("tok-u").principal_type is PrincipalType.USER


def test_purge_expired_removes_only_past_records(store):
    store.create(_record(store, "short", lifetime=timedelta(hours=1)))
    store.create(_record(store, "long", lifetime=timedelta(days=2)))

    removed = store.purge_expired(_now() + timedelta(hours=2))

    assert removed == 1
    assert store.find_active("short", now=_now()) is None
    assert store.find_active("long") is not None


def test_new_ids_are_unique(store):
    assert len({store.new_id() for _ in range(20)}) == 20
