"""Merchant (tenant) account model."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from merchant_auth.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin

FEATURE_USER_MANAGEMENT = "user_management"


class Merchant(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Tenant account that logs in with its phone number and a PIN.

    Fields
    ------
    name : str
        Display name of the business.
    phone : str
        Login identifier. Unique across the system, stored trimmed.
    timezone : str
        IANA zone name used by downstream reporting.
    pin_hash : str
        Salted hash of the PIN; the plaintext is never stored.
    feature_flags : dict
        Per-merchant switches, e.g. ``{"user_management": true}``.
    """

    __tablename__ = "merchants"

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="UTC")
    pin_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    feature_flags: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    __table_args__ = (UniqueConstraint("phone", name="uq_merchants_phone"),)

    @property
    def user_management_enabled(self) -> bool:
        """Return ``True`` when staff accounts may log in for this merchant."""
        return bool((self.feature_flags or {}).get(FEATURE_USER_MANAGEMENT, False))

    @validates("phone")
    def _normalize_phone(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Phone is required.")
        return value.strip()
