"""Referrers blueprint — /api/referrers/*

Bank referral sources. DELETE deactivates; a referrer row is never removed.

Route Map:
  GET    /api/referrers                — List (active only unless ?include_inactive=true)
  POST   /api/referrers                — Create (or reactivate an inactive namesake)
  GET    /api/referrers/<id>           — Get one
  PATCH  /api/referrers/<id>           — Rename / toggle is_active
  DELETE /api/referrers/<id>           — Deactivate
  GET    /api/referrers/<id>/leads     — Leads from this referrer, filtered
"""

from flask import Blueprint, jsonify, request

from mortgage_crm.decorators import actor_id, api_auth_required
from mortgage_crm.extensions import db
from mortgage_crm.serializers import lead_dict, referrer_dict
from mortgage_crm.services import lead_service, referrer_service
from mortgage_crm.services.validation import check_bool, require_object

referrers_bp = Blueprint("referrers", __name__, url_prefix="/api/referrers")


@referrers_bp.route("", methods=["GET"])
@api_auth_required
def api_list_referrers():
    include_inactive = request.args.get("include_inactive", "").lower() in ("1", "true", "yes")
    referrers = referrer_service.list_referrers(active_only=not include_inactive)
    return jsonify([referrer_dict(r) for r in referrers])


@referrers_bp.route("", methods=["POST"])
@api_auth_required
def api_create_referrer():
    data = require_object(request.get_json(silent=True))
    referrer, created = referrer_service.create_referrer(
        data.get("name"), actor_user_id=actor_id()
    )
    db.session.commit()
    return jsonify(referrer_dict(referrer)), 201 if created else 200


@referrers_bp.route("/<referrer_id>", methods=["GET"])
@api_auth_required
def api_get_referrer(referrer_id):
    return jsonify(referrer_dict(referrer_service.get_referrer(referrer_id)))


@referrers_bp.route("/<referrer_id>", methods=["PATCH"])
@api_auth_required
def api_update_referrer(referrer_id):
    data = require_object(request.get_json(silent=True))
    is_active = None
    if "is_active" in data:
        is_active = check_bool("is_active", data["is_active"])
    referrer = referrer_service.update_referrer(
        referrer_id,
        name=data.get("name"),
        is_active=is_active,
        actor_user_id=actor_id(),
    )
    db.session.commit()
    return jsonify(referrer_dict(referrer))


@referrers_bp.route("/<referrer_id>", methods=["DELETE"])
@api_auth_required
def api_deactivate_referrer(referrer_id):
    referrer = referrer_service.deactivate_referrer(referrer_id, actor_user_id=actor_id())
    db.session.commit()
    return jsonify(referrer_dict(referrer))


@referrers_bp.route("/<referrer_id>/leads", methods=["GET"])
@api_auth_required
def api_referrer_leads(referrer_id):
    referrer, leads = lead_service.search_referrer_leads(
        referrer_id,
        status=request.args.get("status"),
        start_date=request.args.get("start_date"),
        end_date=request.args.get("end_date"),
        search=request.args.get("search"),
    )
    return jsonify({
        "referrer": referrer_dict(referrer),
        "leads": [lead_dict(lead) for lead in leads],
        "total_count": len(leads),
    })
