"""Checklists blueprint — /api/checklists/*, /api/checklist-items/*

Item status changes never move the checklist's own status; that only
changes through PATCH /api/checklists/<id>.

Route Map:
  PATCH  /api/checklists/<id>        — Set checklist status (OPEN | IN_PROGRESS | COMPLETE)
  DELETE /api/checklists/<id>        — Delete checklist and its items
  PATCH  /api/checklist-items/<id>   — Set item status (PENDING | RECEIVED | WAIVED)
"""

from flask import Blueprint, jsonify, request

from mortgage_crm.decorators import actor_id, api_auth_required
from mortgage_crm.extensions import db
from mortgage_crm.serializers import checklist_dict, checklist_item_dict
from mortgage_crm.services import checklist_service
from mortgage_crm.services.validation import require_object

checklists_bp = Blueprint("checklists", __name__, url_prefix="/api")


# ─── Checklists ──────────────────────────────────────────────────

@checklists_bp.route("/checklists/<checklist_id>", methods=["PATCH"])
@api_auth_required
def api_update_checklist(checklist_id):
    data = require_object(request.get_json(silent=True))
    checklist = checklist_service.set_checklist_status(checklist_id, data.get("status"))
    db.session.commit()
    return jsonify(checklist_dict(checklist))


@checklists_bp.route("/checklists/<checklist_id>", methods=["DELETE"])
@api_auth_required
def api_delete_checklist(checklist_id):
    checklist_service.delete_checklist(checklist_id, actor_user_id=actor_id())
    db.session.commit()
    return jsonify({"success": True})


# ─── Items ───────────────────────────────────────────────────────

@checklists_bp.route("/checklist-items/<item_id>", methods=["PATCH"])
@api_auth_required
def api_update_item(item_id):
    data = require_object(request.get_json(silent=True))
    item = checklist_service.set_item_status(item_id, data.get("status"))
    db.session.commit()
    return jsonify(checklist_item_dict(item))
