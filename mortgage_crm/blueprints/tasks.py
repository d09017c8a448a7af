"""Tasks blueprint — /api/tasks/*

Route Map:
  PATCH  /api/tasks/<id>  — Set status (OPEN | DONE | CANCELED)
  DELETE /api/tasks/<id>  — Delete

Listing and creating tasks hang off the lead: see leads.py.
"""

from flask import Blueprint, jsonify, request

from mortgage_crm.decorators import api_auth_required
from mortgage_crm.extensions import db
from mortgage_crm.serializers import task_dict
from mortgage_crm.services import task_service
from mortgage_crm.services.validation import require_object

tasks_bp = Blueprint("tasks", __name__, url_prefix="/api/tasks")


@tasks_bp.route("/<task_id>", methods=["PATCH"])
@api_auth_required
def api_update_task(task_id):
    data = require_object(request.get_json(silent=True))
    task = task_service.set_task_status(task_id, data.get("status"))
    db.session.commit()
    return jsonify(task_dict(task))


@tasks_bp.route("/<task_id>", methods=["DELETE"])
@api_auth_required
def api_delete_task(task_id):
    task_service.delete_task(task_id)
    db.session.commit()
    return jsonify({"success": True})
