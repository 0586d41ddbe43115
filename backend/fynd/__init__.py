import logging

from flask import Flask
from .config import get_config
from .extensions import db, migrate, cors
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from dotenv import load_dotenv
from werkzeug.middleware.proxy_fix import ProxyFix

logger = logging.getLogger(__name__)


def create_app(config_name: str | None = None) -> Flask:
    app = Flask(__name__)

    # Load config
    # Ensure .env is loaded before reading env vars
    load_dotenv()
    app.config.from_object(get_config(config_name))

    logging.basicConfig(
        level=str(app.config.get("LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Honor proxy headers from Nginx for correct url_for(_external=True) scheme/host
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=1)  # type: ignore[assignment]

    # Init extensions
    cors.init_app(app)
    db.init_app(app)
    migrate.init_app(app, db)

    from .errors import register_error_handlers
    register_error_handlers(app)

    # Models must be imported so metadata (and migrations) see every table
    from . import models  # noqa: F401

    # Register blueprints (v1 API)
    from .apis.v1 import register_api
    register_api(app)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/db-check")
    def db_check():
        try:
            db.session.execute(text("SELECT 1"))
            return {"db": "ok"}
        except SQLAlchemyError as e:
            logger.error("Database check failed: %s", e)
            return {"db": "error", "message": str(e)}, 500

    return app
