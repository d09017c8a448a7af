import os
import logging

import click
from flask import Flask, jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
from werkzeug.security import generate_password_hash

from mortgage_crm.config import config_by_name
from mortgage_crm.errors import CRMError
from mortgage_crm.extensions import db, migrate, login_manager, csrf, limiter

logger = logging.getLogger(__name__)


def create_app(config_name=None):
    """Application factory."""

    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    # --- Validate required env vars (skip in testing) ---
    if config_name != "testing":
        try:
            config_by_name[config_name].validate()
        except RuntimeError as e:
            app.logger.warning(f"Config validation: {e}")

    # --- Init extensions ---
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)

    # --- Import models so Alembic can discover them ---
    with app.app_context():
        from mortgage_crm import models  # noqa: F401

    # --- Register blueprints ---
    from mortgage_crm.blueprints.auth import auth_bp
    from mortgage_crm.blueprints.dashboard import dashboard_bp
    from mortgage_crm.blueprints.referrers import referrers_bp
    from mortgage_crm.blueprints.leads import leads_bp
    from mortgage_crm.blueprints.notes import notes_bp
    from mortgage_crm.blueprints.tasks import tasks_bp
    from mortgage_crm.blueprints.checklists import checklists_bp
    from mortgage_crm.blueprints.checklist_templates import templates_bp
    from mortgage_crm.blueprints.assistant import assistant_bp

    blueprints = [
        auth_bp,
        dashboard_bp,
        referrers_bp,
        leads_bp,
        notes_bp,
        tasks_bp,
        checklists_bp,
        templates_bp,
        assistant_bp,
    ]
    for bp in blueprints:
        app.register_blueprint(bp)
        # Exempt from CSRF — JSON API, authenticated by session or Bearer key
        csrf.exempt(bp)

    # --- Root route ---
    @app.route("/")
    def index():
        return jsonify({"name": "mortgage-crm", "status": "ok"})

    # --- Error handlers ---
    register_error_handlers(app)

    # --- CLI commands ---
    register_cli(app)

    # --- Security headers ---
    @app.after_request
    def add_security_headers(response):
        """Add security headers to every response."""
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        # Prevent clickjacking
        response.headers["X-Frame-Options"] = "DENY"
        # Control referrer information
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Permissions Policy (restrict browser features)
        response.headers["Permissions-Policy"] = (
            "camera=(), microphone=(), geolocation=()"
        )
        # JSON only; nothing to load
        response.headers["Content-Security-Policy"] = (
            "default-src 'none'; frame-ancestors 'none';"
        )
        # Strict Transport Security (only in production)
        if not app.debug and not app.testing:
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )
        return response

    # --- Logging ---
    if not app.debug:
        logging.basicConfig(level=logging.INFO)

    return app


def register_error_handlers(app):
    """JSON bodies for domain errors and HTTP errors: {"error": ..., "details"?: ...}."""

    @app.errorhandler(CRMError)
    def handle_crm_error(e):
        if e.status_code >= 500:
            logger.error(f"{request.method} {request.path} failed: {e.message}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description or e.name}), e.code

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(e):
        db.session.rollback()
        logger.exception(f"Database error on {request.method} {request.path}: {e}")
        return jsonify({"error": "Database error."}), 500

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        logger.exception(f"Unhandled error on {request.method} {request.path}: {e}")
        return jsonify({"error": "Internal server error."}), 500


def register_cli(app):
    """Register custom CLI commands with the Flask app."""

    @app.cli.command("seed-admin")
    @click.option("--email", default="admin@mortgage.local", help="Admin email")
    @click.option("--password", default="admin123", help="Admin password")
    @click.option("--name", default="Admin", help="Full name")
    def seed_admin(email, password, name):
        """Create the admin user (or reset its password).

        Usage:
            flask seed-admin
            flask seed-admin --email admin@example.com --password s3cret
        """
        from mortgage_crm.models.user import User

        email = email.lower().strip()
        existing = User.query.filter_by(email=email).first()
        if existing:
            existing.password_hash = generate_password_hash(password)
            existing.is_admin = True
            existing.is_active = True
            click.echo(f"Admin user already exists, password reset: {email}")
        else:
            db.session.add(User(
                email=email,
                password_hash=generate_password_hash(password),
                full_name=name,
                is_admin=True,
            ))
            click.echo(f"Created admin user: {email}")
        db.session.commit()

    @app.cli.command("seed-templates")
    def seed_templates():
        """Create the default checklist templates if none exist.

        Usage:
            flask seed-templates
        """
        from mortgage_crm.services.template_service import seed_default_templates

        created = seed_default_templates()
        db.session.commit()
        if created:
            click.echo(f"Created {created} checklist templates.")
        else:
            click.echo("Checklist templates already exist; nothing to do.")
