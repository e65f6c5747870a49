from __future__ import annotations

from typing import Protocol


class CredentialHasher(Protocol):
    """Port for one-way salted hashing of PINs and passwords."""

    def hash(self, secret: str) -> str:
        """Return a salted digest. :raises ValueError: when the secret is too long."""

    def verify(self, digest: str, secret: str) -> bool:
        """Return ``True`` on match. Never raises on mismatch or on a malformed digest."""
