
from flask import Blueprint, Flask, g, request, current_app

from ...modules.items.routes import bp as items_bp
from ...modules.claims.routes import bp as claims_bp
from ...modules.verifications.routes import bp as verifications_bp
from ...modules.matches.routes import bp as matches_bp
from ...modules.notifications.routes import bp as notifications_bp
from ...modules.messages.routes import bp as messages_bp
from ...modules.users.routes import bp as users_bp


def register_api(app: Flask) -> None:
    api_v1 = Blueprint("api_v1", __name__, url_prefix="/api/v1")

    # Identity comes from the external auth service as a signed bearer token.
    # In development (DEBUG=True) `X-User-Id` / `X-User-Email` / `X-User-Role`
    # headers are accepted as well to simplify local testing.
    @api_v1.before_request  # type: ignore
    def _load_identity():
        from ...security import Identity, verify_token
        ident = None
        debug_mode = bool(current_app.config.get("DEBUG"))

        # Bearer token takes precedence
        auth = request.headers.get("Authorization") or ""
        if auth.lower().startswith("bearer "):
            ident = verify_token(auth[7:].strip(), max_age=current_app.config.get("AUTH_TOKEN_MAX_AGE"))
        elif debug_mode:
            raw = (request.headers.get("X-User-Id") or "").strip()
            if raw:
                ident = Identity(
                    user_id=raw[:64],
                    email=(request.headers.get("X-User-Email") or "").strip() or None,
                    role=(request.headers.get("X-User-Role") or "user").strip().lower(),
                )
        g.identity = ident  # type: ignore[attr-defined]

    # Mount feature blueprints
    api_v1.register_blueprint(items_bp)
    api_v1.register_blueprint(claims_bp)
    api_v1.register_blueprint(verifications_bp)
    api_v1.register_blueprint(matches_bp)
    api_v1.register_blueprint(notifications_bp)
    api_v1.register_blueprint(messages_bp)
    api_v1.register_blueprint(users_bp)

    app.register_blueprint(api_v1)
