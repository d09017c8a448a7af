"""Auth blueprint — /auth/*

JSON session login for CRM staff. Accounts are created with
`flask seed-admin`; there is no self-registration.

Route Map:
  POST /auth/login   — Email + password login, starts a session
  POST /auth/logout  — End the session
  GET  /auth/me      — Current user
"""

import logging

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required, login_user, logout_user
from werkzeug.security import check_password_hash

from mortgage_crm.extensions import db, limiter
from mortgage_crm.models.user import User
from mortgage_crm.serializers import user_dict
from mortgage_crm.services import audit_service
from mortgage_crm.services.validation import require_object

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


# ──────────────────────────────────────────────
# POST /auth/login
# ──────────────────────────────────────────────

@auth_bp.route("/login", methods=["POST"])
@limiter.limit("15 per minute")
def login():
    """Standard email + password login."""
    data = require_object(request.get_json(silent=True))
    email = str(data.get("email") or "").lower().strip()
    password = str(data.get("password") or "")
    remember = bool(data.get("remember"))

    if not email or not password:
        return jsonify({"error": "Email and password are required."}), 400

    user = User.query.filter_by(email=email).first()

    if user is None or not check_password_hash(user.password_hash, password):
        logger.info(f"Failed login for {email}")
        return jsonify({"error": "Invalid email or password."}), 401

    if not user.is_active:
        return jsonify({"error": "Your account has been deactivated."}), 403

    login_user(user, remember=remember)

    audit_service.record("user.login", "user", user.id, actor_user_id=user.id)
    db.session.commit()

    return jsonify(user_dict(user))


# ──────────────────────────────────────────────
# POST /auth/logout
# ──────────────────────────────────────────────

@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"success": True})


# ──────────────────────────────────────────────
# GET /auth/me
# ──────────────────────────────────────────────

@auth_bp.route("/me")
@login_required
def me():
    return jsonify(user_dict(current_user))
