"""Notes blueprint — /api/notes/*

Route Map:
  PATCH  /api/notes/<id>  — Edit body and/or pinned flag
  DELETE /api/notes/<id>  — Delete

Listing and creating notes hang off the lead: see leads.py.
"""

from flask import Blueprint, jsonify, request

from mortgage_crm.decorators import api_auth_required
from mortgage_crm.extensions import db
from mortgage_crm.serializers import note_dict
from mortgage_crm.services import note_service
from mortgage_crm.services.validation import require_object

notes_bp = Blueprint("notes", __name__, url_prefix="/api/notes")


@notes_bp.route("/<note_id>", methods=["PATCH"])
@api_auth_required
def api_update_note(note_id):
    data = require_object(request.get_json(silent=True))
    note = note_service.update_note(
        note_id, body=data.get("body"), pinned=data.get("pinned")
    )
    db.session.commit()
    return jsonify(note_dict(note))


@notes_bp.route("/<note_id>", methods=["DELETE"])
@api_auth_required
def api_delete_note(note_id):
    note_service.delete_note(note_id)
    db.session.commit()
    return jsonify({"success": True})
