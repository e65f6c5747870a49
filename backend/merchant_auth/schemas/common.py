"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate


class PaginationQuerySchema(Schema):
    """Validate ``page``/``limit``/``sort`` query parameters.

    ``sort`` is a comma-separated list of tokens (``-created_at,username``).
    """

    class Meta:
        unknown = EXCLUDE

    def __init__(self, *, default_limit: int = 20, max_limit: int = 100, **kwargs: Any) -> None:
        self._default_limit = default_limit
        self._max_limit = max_limit
        super().__init__(**kwargs)

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(validate=validate.Range(min=1))
    sort = fields.String(load_default="")

    @post_load
    def apply_defaults(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        raw = data.get("sort") or ""
        data["sort"] = [segment.strip() for segment in raw.split(",") if segment.strip()]
        limit = data.get("limit", self._default_limit)
        data["limit"] = min(max(limit, 1), self._max_limit)
        return data


def build_meta(*, total: int, page: int, limit: int) -> dict[str, int]:
    """Return a ``meta`` mapping for paginated responses."""

    return {"total": int(total), "page": int(page), "limit": int(limit)}
