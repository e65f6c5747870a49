"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request

from merchant_auth.api.context import require_identity
from merchant_auth.schemas.common import PaginationQuerySchema
from merchant_auth.services.access.service import AccessService

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(slots=True)
class Pagination:
    """Container holding pagination arguments parsed from the request."""

    page: int
    limit: int
    sort: list[str]


def parse_pagination(default_limit: int = 20, max_limit: int = 100) -> Pagination:
    """Parse pagination parameters from ``request.args`` using Marshmallow."""

    schema = PaginationQuerySchema(default_limit=default_limit, max_limit=max_limit)
    data = schema.load(request.args)
    return Pagination(page=data["page"], limit=data["limit"], sort=data["sort"])


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def no_content() -> Response:
    return Response(status=204)


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


def require_permission(code: str) -> Callable[[F], F]:
    """Ensure the call identity holds permission ``code`` (owner holds all)."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            AccessService().ensure_permission(require_identity(), code)
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
