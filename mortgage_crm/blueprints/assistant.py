"""Assistant blueprint — /api/assistant

Route Map:
  POST /api/assistant  — Ask the AI assistant (prompt, optional lead_id)
"""

from flask import Blueprint, jsonify, request

from mortgage_crm.decorators import api_auth_required
from mortgage_crm.extensions import limiter
from mortgage_crm.services import assistant_service
from mortgage_crm.services.validation import require_object

assistant_bp = Blueprint("assistant", __name__, url_prefix="/api/assistant")


@assistant_bp.route("", methods=["POST"])
@api_auth_required
@limiter.limit("10 per minute")
def api_ask():
    data = require_object(request.get_json(silent=True))
    reply = assistant_service.ask(data.get("prompt"), lead_id=data.get("lead_id"))
    return jsonify({"reply": reply})
