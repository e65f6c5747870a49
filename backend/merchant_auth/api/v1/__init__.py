"""API v1 blueprint package bundling versioned routes."""

from __future__ import annotations

from flask import Blueprint

API_VERSION = "v1"

# Import blueprints *only here* to keep imports localized and avoid cycles.
from .auth import bp as auth_bp  # noqa: E402
from .health import bp as health_bp  # noqa: E402
from .merchants import bp as merchants_bp  # noqa: E402
from .roles import permissions_bp, roles_bp  # noqa: E402
from .users import bp as users_bp  # noqa: E402

# Each tuple: (blueprint, url_prefix_relative_to_version)
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),  # -> /api/v1
    (auth_bp, "/auth"),  # -> /api/v1/auth
    (merchants_bp, "/merchants"),
    (users_bp, "/users"),
    (roles_bp, "/roles"),
    (permissions_bp, "/permissions"),
]
