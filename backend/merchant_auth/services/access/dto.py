from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PermissionOut:
    """Catalog entry."""

    code: str
    name: str
    description: str | None
    module: str


@dataclass(frozen=True, slots=True)
class RoleOut:
    """
    Role with its permission codes.

    :param merchant_id: Owning merchant, ``None`` for shared system roles.
    """

    id: str
    merchant_id: str | None
    name: str
    description: str | None
    is_system: bool
    permissions: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class RoleCreateIn:
    name: str
    description: str | None = None
    permissions: tuple[str, ...] = ()
