"""Dashboard blueprint — /api/dashboard, /api/calculator

Route Map:
  GET  /api/dashboard    — Lead/task/checklist counts + recent activity
  POST /api/calculator   — Mortgage payment and GDS/TDS calculator (no writes)
"""

from flask import Blueprint, jsonify, request

from mortgage_crm.decorators import api_auth_required
from mortgage_crm.errors import ValidationError
from mortgage_crm.serializers import audit_event_dict
from mortgage_crm.services import dashboard_service, finance_service
from mortgage_crm.services.validation import parse_number, require_object

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api")

CALCULATOR_INPUTS = [
    "property_value",
    "down_payment",
    "loan_amount",
    "interest_rate",
    "term_years",
    "monthly_income",
    "monthly_debts",
]


# ─── Dashboard ───────────────────────────────────────────────────

@dashboard_bp.route("/dashboard")
@api_auth_required
def api_dashboard():
    stats = dashboard_service.get_dashboard_stats()
    events = dashboard_service.get_recent_activity(limit=10)
    stats["recent_activity"] = [audit_event_dict(e) for e in events]
    return jsonify(stats)


# ─── Calculator ──────────────────────────────────────────────────

@dashboard_bp.route("/calculator", methods=["POST"])
@api_auth_required
def api_calculator():
    data = require_object(request.get_json(silent=True))
    inputs = {}
    for field in CALCULATOR_INPUTS:
        value = parse_number(field, data.get(field), integer=field == "term_years")
        if value is not None and value < 0:
            raise ValidationError(
                f"{field.replace('_', ' ').capitalize()} cannot be negative.",
                details={field: "negative"},
            )
        inputs[field] = value
    return jsonify(finance_service.calculate(**inputs))
