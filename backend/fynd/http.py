from __future__ import annotations

from flask import request
from marshmallow import Schema

from .errors import ValidationError


def load_body(schema: Schema) -> dict:
    """Validate the JSON body with a marshmallow schema.

    Schema errors propagate and are rendered by the app's error handler.
    """
    return schema.load(request.get_json(silent=True) or {})


def int_arg(name: str, default: int | None = None, *, required: bool = False) -> int | None:
    raw = request.args.get(name)
    if raw is None or raw == "":
        if required:
            raise ValidationError(name, f"{name} is required")
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(name, f"Invalid {name}")


def bool_arg(name: str, default: bool = False) -> bool:
    raw = request.args.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}
