"""
Custom route decorators for access control.

- api_auth_required: session login OR a Bearer token matching CRM_API_KEY.
  Answers with JSON 401; the CRM has no HTML pages to redirect to.
"""

import hmac
from functools import wraps

from flask import current_app, jsonify, request
from flask_login import current_user


def api_auth_required(f):
    """Allow access via a logged-in session OR a Bearer token matching CRM_API_KEY."""

    @wraps(f)
    def decorated(*args, **kwargs):
        # Check Bearer token first (for scripts / integrations)
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            token = auth_header[7:]
            expected = current_app.config.get("CRM_API_KEY") or ""
            if expected and hmac.compare_digest(token, expected):
                return f(*args, **kwargs)
            return jsonify({"error": "Invalid API key"}), 401

        # Fall back to session auth
        if not current_user.is_authenticated or not current_user.is_active:
            return jsonify({"error": "Authentication required"}), 401
        return f(*args, **kwargs)

    return decorated


def actor_id():
    """Id of the session user, or None for API-key callers."""
    if current_user.is_authenticated:
        return current_user.id
    return None
