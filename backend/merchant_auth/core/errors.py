"""Centralized JSON (RFC 7807) error handling for the API."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from merchant_auth.core.logger import ensure_request_id

log = logging.getLogger(__name__)


def _http_status_to_code(status_code: int) -> str:
    """Map common HTTP status codes to canonical, stable error codes."""
    mapping = {
        400: "bad_request",
        401: "unauthorized",
        403: "forbidden",
        404: "not_found",
        405: "method_not_allowed",
        409: "conflict",
        415: "unsupported_media_type",
        422: "unprocessable_entity",
        500: "internal_server_error",
        503: "service_unavailable",
    }
    return mapping.get(status_code, "error")


def _as_problem(
    *,
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build an RFC 7807 Problem Details dict.

    :param status: HTTP status code.
    :param code: Stable machine-consumable error code.
    :param message: Human-readable error summary (safe for clients).
    :param details: Optional safe, structured details.
    :returns: Problem+JSON dictionary.
    :rtype: dict
    """
    problem: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": status,
        "detail": message,
        "instance": request.path if request else None,
        "code": code,
    }
    if details:
        problem["details"] = details
    problem["request_id"] = ensure_request_id()
    return problem


def _problem_response(problem: dict[str, Any]) -> Response:
    """Return a Flask response with ``application/problem+json`` media type."""
    resp = jsonify(problem)
    resp.mimetype = "application/problem+json"
    return resp


class APIError(Exception):
    """
    Represent a JSON-serializable API error.

    Parameters
    ----------
    message : str
        Human-readable description presented to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    code : str, optional
        Machine-readable identifier, typically snake_case. Defaults to
        ``"bad_request"``.
    details : dict[str, Any] | None, optional
        Optional structured payload included in the response body.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}

    def to_problem(self) -> dict[str, Any]:
        """Serialize error metadata into an RFC 7807 problem."""
        return _as_problem(
            status=self.status_code,
            code=self.code,
            message=self.message,
            details=self.details or None,
        )


class NotFound(APIError):
    """404 when resources are missing."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=HTTPStatus.NOT_FOUND, code="not_found")


class Conflict(APIError):
    """409 for uniqueness/constraint collisions."""

    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(message, status_code=HTTPStatus.CONFLICT, code="conflict")


class Unauthorized(APIError):
    """401 when authentication fails."""

    def __init__(self, message: str = "Unauthorized", *, code: str = "unauthorized") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code=code)


class Forbidden(APIError):
    """403 when authorization denies access."""

    def __init__(self, message: str = "Forbidden", *, code: str = "forbidden") -> None:
        super().__init__(message, status_code=HTTPStatus.FORBIDDEN, code=code)


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Guarantees RFC 7807 responses for all handled errors.
    - Domain errors raised by services are translated through
      :meth:`BaseService.translate_exceptions` so views may let them bubble.
    - Emits 5xx with ``exc_info`` for traceability; 4xx as warnings.
    """
    from merchant_auth.services._shared.base import BaseService
    from merchant_auth.services._shared.errors import ServiceError

    def _render_api_error(err: APIError):
        problem = err.to_problem()
        if err.status_code >= 500:
            log.error(
                "APIError: code=%s status=%s msg=%s",
                err.code,
                err.status_code,
                err.message,
                exc_info=err.__cause__ is not None,
            )
        else:
            log.warning("APIError: code=%s status=%s msg=%s", err.code, err.status_code, err.message)
        return _problem_response(problem), err.status_code

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        return _render_api_error(err)

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        translated = BaseService().translate_exceptions(err)
        if not isinstance(translated, APIError):  # pragma: no cover - translation is total
            raise err
        translated.__cause__ = err.__cause__
        return _render_api_error(translated)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        error_code = _http_status_to_code(status)
        message = (err.description or error_code.replace("_", " ").capitalize()).strip()
        if status == HTTPStatus.NOT_FOUND and request:
            message = f"Route '{request.path}' not found"
        problem = _as_problem(status=status, code=error_code, message=message)
        level = log.error if status >= 500 else log.warning
        level("HTTPException: code=%s status=%s detail=%s", error_code, status, message)
        return _problem_response(problem), status

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        problem = _as_problem(
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            code="validation_error",
            message="Validation failed",
            details={"errors": err.messages},
        )
        log.warning("ValidationError on %s", request.path)
        return _problem_response(problem), HTTPStatus.UNPROCESSABLE_ENTITY

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Do not leak raw DB error to clients
        problem = _as_problem(
            status=HTTPStatus.CONFLICT,
            code="conflict",
            message="Resource conflict",
        )
        log.error("IntegrityError", exc_info=True)
        return _problem_response(problem), HTTPStatus.CONFLICT

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        problem = _as_problem(
            status=HTTPStatus.SERVICE_UNAVAILABLE,
            code="service_unavailable",
            message="Service temporarily unavailable",
        )
        log.error("OperationalError", exc_info=True)
        return _problem_response(problem), HTTPStatus.SERVICE_UNAVAILABLE

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        # Unexpected server-side error; never leak internal details
        problem = _as_problem(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            code="internal_server_error",
            message="Unexpected error",
        )
        log.error("Unhandled exception", exc_info=True)
        return _problem_response(problem), HTTPStatus.INTERNAL_SERVER_ERROR
