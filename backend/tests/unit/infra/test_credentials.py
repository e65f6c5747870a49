"""Unit tests for the werkzeug-backed credential hasher."""

from __future__ import annotations

import pytest

from merchant_auth.infra.security.credentials import MAX_SECRET_LENGTH, WerkzeugCredentialHasher


@pytest.fixture()
def hasher() -> WerkzeugCredentialHasher:
    return WerkzeugCredentialHasher(method="pbkdf2:sha256:1000")


def test_hash_then_verify_matches(hasher):
    digest = hasher.hash("1234")
    assert digest != "1234"
    assert hasher.verify(digest, "1234")


def test_verify_rejects_wrong_secret(hasher):
    digest = hasher.hash("1234")
    assert not hasher.verify(digest, "4321")


def test_same_secret_produces_distinct_digests(hasher):
    """A fresh salt per call means equal secrets never share a digest."""
    assert hasher.hash("s3cret-pass") != hasher.hash("s3cret-pass")


def test_method_is_recorded_in_digest(hasher):
    assert hasher.hash("1234").startswith("pbkdf2:sha256:1000$")


@pytest.mark.parametrize("digest", ["", "not-a-hash", "unknown$salt$value"])
def test_verify_malformed_digest_is_false(hasher, digest):
    assert hasher.verify(digest, "1234") is False


def test_empty_secret_hashes_and_verifies(hasher):
    digest = hasher.hash("")

    assert hasher.verify(digest, "") is True
    assert hasher.verify(digest, "1234") is False


def test_hash_rejects_oversized_secret(hasher):
    with pytest.raises(ValueError):
        hasher.hash("x" * (MAX_SECRET_LENGTH + 1))
