"""Werkzeug-backed credential hashing for merchant PINs and staff passwords."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from werkzeug.security import check_password_hash, generate_password_hash

from merchant_auth.services._shared.ports import CredentialHasher

#: Longest secret accepted by :meth:`WerkzeugCredentialHasher.hash`, in UTF-8 bytes.
MAX_SECRET_LENGTH: Final[int] = 1024


@dataclass(frozen=True, slots=True)
class WerkzeugCredentialHasher(CredentialHasher):
    """
    Salted adaptive hashing through :mod:`werkzeug.security`.

    :param method: Werkzeug method string carrying the cost factor, e.g.
        ``"scrypt:32768:8:1"`` or ``"pbkdf2:sha256:600000"``.
    :param salt_length: Random salt length in characters.
    """

    method: str = "scrypt:32768:8:1"
    salt_length: int = 16

    def hash(self, secret: str) -> str:
        """
        Hash ``secret`` with a fresh salt.

        :raises ValueError: If ``secret`` exceeds :data:`MAX_SECRET_LENGTH`.
        """
        if len(secret.encode("utf-8")) > MAX_SECRET_LENGTH:
            raise ValueError("Secret exceeds the maximum supported length")
        return generate_password_hash(secret, method=self.method, salt_length=self.salt_length)

    def verify(self, digest: str, secret: str) -> bool:
        """Constant-time comparison; malformed digests simply do not match."""
        if not digest or secret is None:
            return False
        try:
            return check_password_hash(digest, secret)
        except ValueError:
            return False
