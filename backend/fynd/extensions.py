"""Flask extension singletons, bound to the app in ``create_app``."""
import os

from flask_cors import CORS
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

_DEV_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


def _cors_origins() -> list[str]:
    # Comma-separated CORS_ALLOW_ORIGINS; production gets no wildcard fallback
    raw = os.getenv("CORS_ALLOW_ORIGINS", "")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    if origins:
        return origins
    if os.getenv("FLASK_ENV", "development").lower() == "production":
        return []
    return list(_DEV_ORIGINS)


db = SQLAlchemy()
migrate = Migrate()
cors = CORS(
    resources={
        r"/api/*": {
            "origins": _cors_origins(),
            "allow_headers": ["Authorization", "Content-Type", "X-User-Id", "X-User-Email", "X-User-Role"],
        }
    }
)
