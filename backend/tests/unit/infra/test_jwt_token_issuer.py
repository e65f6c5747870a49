"""Unit tests for the PyJWT token issuer."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from merchant_auth.infra.jwt.jwt_token_issuer import JWTTokenIssuer
from merchant_auth.services._shared.errors import ExpiredToken, InvalidToken
from merchant_auth.services._shared.ports import ACCESS, REFRESH

SECRET = "unit-test-secret-key-with-at-least-32-bytes!"


def _issuer(**overrides) -> JWTTokenIssuer:
    params = {
        "secret_key": SECRET,
        "access_ttl": timedelta(minutes=15),
        "refresh_ttl": timedelta(days=7),
    }
    params.update(overrides)
    return JWTTokenIssuer(**params)


def test_access_token_round_trip_claims():
    issuer = _issuer()
    token = issuer.issue_access("m-1", principal_type="merchant")

    claims = issuer.validate(token)

    assert claims.subject == "m-1"
    assert claims.token_type == ACCESS
    assert claims.principal_type == "merchant"
    assert claims.expires_at - claims.issued_at == timedelta(minutes=15)
    assert claims.jti


def test_refresh_token_uses_refresh_lifetime():
    issuer = _issuer()
    claims = issuer.validate(issuer.issue_refresh("u-1", principal_type="user"), expected_type=REFRESH)
    assert claims.expires_at - claims.issued_at == timedelta(days=7)


def test_extra_claims_are_carried_but_cannot_override_reserved():
    issuer = _issuer()
    token = issuer.issue_access(
        "u-1", principal_type="user", extra_claims={"merchant_id": "m-1", "sub": "forged"}
    )

    claims = issuer.validate(token)

    assert claims.subject == "u-1"
    assert claims.extra == {"merchant_id": "m-1"}


def test_tokens_for_same_subject_are_distinct():
    issuer = _issuer()
    first = issuer.issue_refresh("m-1", principal_type="merchant")
    second = issuer.issue_refresh("m-1", principal_type="merchant")
    assert first != second


def test_expected_type_mismatch_is_invalid():
    issuer = _issuer()
    access = issuer.issue_access("m-1", principal_type="merchant")
    with pytest.raises(InvalidToken):
        issuer.validate(access, expected_type=REFRESH)


def test_expired_token_raises_expired():
    past = datetime.now(UTC) - timedelta(hours=1)
    issuer = _issuer(clock=lambda: past)
    token = issuer.issue_access("m-1", principal_type="merchant")
    with pytest.raises(ExpiredToken):
        issuer.validate(token)


def test_tampered_token_is_invalid():
    """A payload swapped under another token's signature fails verification."""
    issuer = _issuer()
    original = issuer.issue_access("m-1", principal_type="merchant")
    forged = issuer.issue_access("m-2", principal_type="merchant")
    head, _, signature = original.split(".")
    _, payload, _ = forged.split(".")
    with pytest.raises(InvalidToken):
        issuer.validate(".".join([head, payload, signature]))


def test_token_signed_with_other_key_is_invalid():
    token = _issuer(secret_key="another-secret-key-with-at-least-32-bytes").issue_access(
        "m-1", principal_type="merchant"
    )
    with pytest.raises(InvalidToken):
        _issuer().validate(token)


def test_unsigned_token_is_rejected():
    now = int(datetime.now(UTC).timestamp())
    payload = {"sub": "m-1", "iat": now, "nbf": now, "exp": now + 60, "jti": "x", "type": ACCESS, "pt": "merchant"}
    token = jwt.encode(payload, key=None, algorithm="none")
    with pytest.raises(InvalidToken):
        _issuer().validate(token)


def test_other_hmac_algorithm_is_rejected():
    token = _issuer(algorithm="HS512").issue_access("m-1", principal_type="merchant")
    with pytest.raises(InvalidToken):
        _issuer().validate(token)


def test_missing_type_claim_is_invalid():
    now = int(datetime.now(UTC).timestamp())
    payload = {"sub": "m-1", "iat": now, "nbf": now, "exp": now + 60, "jti": "x"}
    token = jwt.encode(payload, SECRET, algorithm="HS256")
    with pytest.raises(InvalidToken):
        _issuer().validate(token)


def test_issuer_claim_is_enforced_when_configured():
    token = _issuer().issue_access("m-1", principal_type="merchant")
    with pytest.raises(InvalidToken):
        _issuer(issuer="merchant-auth").validate(token)


@pytest.mark.parametrize("algorithm", ["RS256", "none", "ES256"])
def test_unsupported_algorithm_is_refused_at_construction(algorithm):
    with pytest.raises(ValueError):
        _issuer(algorithm=algorithm)


def test_non_positive_lifetime_is_refused():
    with pytest.raises(ValueError):
        _issuer(access_ttl=timedelta(0))
