from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired


@dataclass(frozen=True)
class Identity:
    """Authenticated caller as asserted by the external auth service."""

    user_id: str
    email: Optional[str] = None
    role: str = "user"


def _serializer() -> URLSafeTimedSerializer:
    secret = os.getenv("SECRET_KEY", "change-me")
    # Salt provides namespace isolation for tokens
    return URLSafeTimedSerializer(secret_key=secret, salt="auth-token")


def issue_token(user_id: str, email: str | None = None, role: str | None = None) -> str:
    """Issue a signed token for a user.

    Payload is minimal: {"sub": str, "email": str | None, "role": str}
    """
    s = _serializer()
    return s.dumps({"sub": str(user_id), "email": email, "role": str(role or "user")})


def verify_token(token: str, max_age: int | None = None) -> Optional[Identity]:
    """Verify a token and return the caller identity if valid, else None.

    Max age defaults to AUTH_TOKEN_MAX_AGE seconds (30 days).
    """
    if max_age is None:
        max_age_default = 60 * 60 * 24 * 30  # 30 days
        try:
            max_age = int(os.getenv("AUTH_TOKEN_MAX_AGE", str(max_age_default)))
        except ValueError:
            max_age = max_age_default
    try:
        data = _serializer().loads(token, max_age=max_age)
    except (BadSignature, SignatureExpired):
        return None
    if not isinstance(data, dict) or not data.get("sub"):
        return None
    return Identity(
        user_id=str(data["sub"]),
        email=data.get("email") or None,
        role=str(data.get("role") or "user"),
    )


def current_identity() -> Optional[Identity]:
    from flask import g
    return getattr(g, "identity", None)


def require_identity() -> Identity:
    """Return the caller identity or raise 401."""
    from .errors import AuthenticationError
    ident = current_identity()
    if ident is None:
        raise AuthenticationError("Authentication required")
    return ident


def require_role(roles: set[str] | frozenset[str]) -> Identity:
    from .errors import AuthorizationError
    ident = require_identity()
    if ident.role.lower() not in {r.lower() for r in roles}:
        raise AuthorizationError("Insufficient role for this action")
    return ident
