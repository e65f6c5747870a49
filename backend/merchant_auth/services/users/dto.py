# comments in English; reST docstrings
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class UserCreateIn:
    """
    Input DTO for creating a staff user.

    :param username: Login handle, unique inside the merchant.
    :param password: Raw password; hashed before it reaches the model.
    :param email: Optional login alternative.
    :param full_name: Optional display name.
    :param role_id: Optional role visible to the merchant.
    """

    username: str
    password: str
    email: str | None = None
    full_name: str | None = None
    role_id: str | None = None


@dataclass(frozen=True, slots=True)
class UserUpdateIn:
    """
    Partial update of a staff user. ``None`` leaves a field untouched.

    ``clear_role`` detaches the current role (a ``None`` role_id cannot
    express that on its own).
    """

    full_name: str | None = None
    role_id: str | None = None
    clear_role: bool = False
    status: str | None = None
    password: str | None = None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class StaffSummaryOut:
    """
    Minimal staff entry returned with the merchant login.

    :param id: User id.
    :param username: Login handle.
    :param full_name: Display name.
    :param role: Role name, if any.
    """

    id: str
    username: str
    full_name: str | None
    role: str | None


@dataclass(frozen=True, slots=True)
class StaffUserOut:
    """Public-safe staff user representation (never carries the hash)."""

    id: str
    merchant_id: str
    username: str
    email: str | None
    full_name: str | None
    role_id: str | None
    role: str | None
    status: str
    last_login_at: datetime | None
