"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from merchant_auth.api.context import public_endpoint
from merchant_auth.api.deps import json_response, timing
from merchant_auth.core.extensions import db

bp = Blueprint("health", __name__)


@bp.get("/health")
@public_endpoint
@timing
def healthcheck():
    """Return application and database health information."""

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"
    return json_response({"status": "ok", "db": db_status})
