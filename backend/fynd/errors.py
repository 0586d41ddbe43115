"""Error taxonomy shared by the workflow services and the HTTP layer.

Services raise these before mutating anything; ``register_error_handlers``
renders them as ``{"error": message, "code": code}`` JSON bodies.
"""
from __future__ import annotations

import logging

from flask import Flask, jsonify
from marshmallow import ValidationError as SchemaError

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    status_code = 400
    code = "error"

    def __init__(self, message: str, *, code: str | None = None, field: str | None = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.field = field

    def to_dict(self) -> dict:
        body = {"error": self.message, "code": self.code}
        if self.field:
            body["field"] = self.field
        return body


class ValidationError(ServiceError):
    """Malformed input; ``field`` names what was wrong."""

    status_code = 400
    code = "validation_error"

    def __init__(self, field: str, message: str):
        super().__init__(message, field=field)


class ConflictError(ServiceError):
    status_code = 409
    code = "conflict"


class AuthenticationError(ServiceError):
    status_code = 401
    code = "authentication_required"


class AuthorizationError(ServiceError):
    status_code = 403
    code = "forbidden"


class NotFoundError(ServiceError):
    status_code = 404
    code = "not_found"


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ServiceError)
    def _service_error(err: ServiceError):
        if err.status_code >= 500:
            logger.error("Service error: %s", err.message)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(SchemaError)
    def _schema_error(err: SchemaError):
        # Report the first offending field, keeping the full map for clients that want it
        messages = err.normalized_messages()
        field = next(iter(messages), None) if isinstance(messages, dict) else None
        detail = messages.get(field) if field else messages
        if isinstance(detail, list) and detail:
            detail = detail[0]
        body = {
            "error": f"{field}: {detail}" if field else str(detail),
            "code": ValidationError.code,
            "field": field,
            "fields": messages,
        }
        return jsonify(body), 400
