"""
Abstract Unit of Work contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from merchant_auth.repositories import (
        MerchantRepository,
        PermissionRepository,
        RefreshTokenRepository,
        RoleRepository,
        UserRepository,
    )


class UnitOfWork(ABC):
    """
    One transactional boundary shared by every repository of a use case.

    Entering yields the unit itself; a clean exit persists the work, an
    exception discards it.
    """

    merchants: MerchantRepository
    users: UserRepository
    roles: RoleRepository
    permissions: PermissionRepository
    refresh_tokens: RefreshTokenRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
