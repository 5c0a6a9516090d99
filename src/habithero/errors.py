"""Domain exceptions and their mapping onto JSON error responses."""

from __future__ import annotations

from typing import Any

import pydantic
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .logging_config import get_logger

logger = get_logger(__name__)


class HabitHeroError(Exception):
    """Base class for errors raised by the service layer."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(HabitHeroError):
    """Input is well-formed but violates a business rule."""

    status_code = 400


class AuthenticationError(HabitHeroError):
    """Missing, malformed or expired credentials."""

    status_code = 401


class NotFoundError(HabitHeroError):
    """Record is missing or owned by another user."""

    status_code = 404

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} with id {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(HabitHeroError):
    status_code = 409


def structure_validation_errors(exc: pydantic.ValidationError) -> dict[str, list[str]]:
    """Return pydantic errors keyed by dotted field path."""

    structured: dict[str, list[str]] = {}
    for error in exc.errors(include_url=False):
        loc = error.get("loc", ())
        key = ".".join(str(part) for part in loc) if loc else "__root__"
        structured.setdefault(key, []).append(error.get("msg", "Invalid value"))
    return structured


def _error_response(message: str, status: int, details: Any = None):
    body: dict[str, Any] = {"error": message}
    if details is not None:
        body["details"] = details
    return jsonify(body), status


def register_error_handlers(app: Flask) -> None:
    """Translate exceptions raised by route handlers into ``{"error": ...}`` bodies."""

    @app.errorhandler(pydantic.ValidationError)
    def _handle_schema_error(exc: pydantic.ValidationError):
        return _error_response("Invalid request data", 400, structure_validation_errors(exc))

    @app.errorhandler(HabitHeroError)
    def _handle_domain_error(exc: HabitHeroError):
        if exc.status_code >= 500:
            logger.error("Service error: %s", exc.message)
            return _error_response("Internal server error", exc.status_code)
        return _error_response(exc.message, exc.status_code)

    @app.errorhandler(HTTPException)
    def _handle_http_error(exc: HTTPException):
        return _error_response(exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception("Unhandled error while processing request")
        return _error_response("Internal server error", 500)


__all__ = [
    "AuthenticationError",
    "ConflictError",
    "HabitHeroError",
    "NotFoundError",
    "ValidationError",
    "register_error_handlers",
]
