"""
Consultant Onboarding Engine
Flask Application Factory.

Usage:
    from hr_onboarding import create_app
    app = create_app()           # defaults to APP_ENV or "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

from flask import Flask, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate

from hr_onboarding.config import basedir, config
from hr_onboarding.models import db
from hr_onboarding.middleware.logging_config import configure_logging
from hr_onboarding.middleware.rate_limiter import init_rate_limits
from hr_onboarding.middleware.timing import init_request_timing

logger = logging.getLogger(__name__)

# ── SQLite FK enforcement (global engine event) ─────────────────────────
from sqlalchemy import event as _sa_event, engine as _sa_engine  # noqa: E402


@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    """Enable foreign key enforcement for SQLite connections."""
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


migrate = Migrate(directory=os.path.join(basedir, "migrations"))
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],                     # no global limit; applied per blueprint
)


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_path=os.path.join(basedir, "instance"))
    # Instantiated so ProductionConfig can refuse to start without DATABASE_URL
    app.config.from_object(config[config_name]())

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite:///") and not app.config["TESTING"]:
        os.makedirs(app.instance_path, exist_ok=True)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()])
    else:
        CORS(app)

    # ── Request timing middleware ────────────────────────────────────────
    init_request_timing(app)

    # ── Import all models so Alembic can detect them ─────────────────────
    from hr_onboarding.models import onboarding as _onboarding_models  # noqa: F401
    from hr_onboarding.models import template as _template_models      # noqa: F401

    # ── Auto-create tables (CREATE IF NOT EXISTS) + default catalog ──────
    with app.app_context():
        try:
            db.create_all()
            app.logger.info("db.create_all() completed successfully")
        except Exception as e:
            app.logger.warning("db.create_all() failed: %s", e)

        if app.config.get("SEED_DEFAULT_TEMPLATES"):
            from hr_onboarding.models.template import seed_default_templates
            try:
                seed_default_templates()
                db.session.commit()
            except Exception as e:
                db.session.rollback()
                app.logger.warning("Default template seeding failed: %s", e)

    # ── Blueprints ───────────────────────────────────────────────────────
    from hr_onboarding.blueprints.onboarding_bp import onboarding_bp

    app.register_blueprint(onboarding_bp)

    # ── CLI commands ─────────────────────────────────────────────────────
    @app.cli.command("seed-onboarding-templates")
    def seed_onboarding_templates_cmd():
        """Seed the default employee and contractor onboarding templates."""
        from hr_onboarding.models.template import seed_default_templates
        count = seed_default_templates()
        db.session.commit()
        logger.info("Seeded %s new onboarding templates.", count)

    # ── Health check ─────────────────────────────────────────────────────
    @app.route("/api/v1/health")
    def health():
        return {"status": "ok", "app": "Consultant Onboarding Engine"}

    # ── Error handlers ───────────────────────────────────────────────────
    @app.errorhandler(404)
    def not_found(e):
        return {"error": "Not found", "path": request.path}, 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error("500 error: %s", e, exc_info=True)
        return {"error": "Internal server error"}, 500

    @app.errorhandler(405)
    def method_not_allowed(e):
        return {"error": "Method not allowed"}, 405

    @app.errorhandler(413)
    def payload_too_large(e):
        return {"error": "Request body too large"}, 413

    @app.errorhandler(429)
    def rate_limited(e):
        return {"error": "Too many requests", "retry_after": e.description}, 429

    # ── Rate limiting (after blueprints registered) ──────────────────────
    init_rate_limits(app, limiter)

    return app
