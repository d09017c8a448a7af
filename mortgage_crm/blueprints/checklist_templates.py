"""Checklist templates blueprint — /api/checklist-templates/*

Reusable document lists. Editing or deleting a template never touches
checklists already created from it.

Route Map:
  GET    /api/checklist-templates        — List, by name
  POST   /api/checklist-templates        — Create (name, lead_type, items[])
  GET    /api/checklist-templates/<id>   — Get one with items
  PATCH  /api/checklist-templates/<id>   — Update; items[] replaces the whole set
  DELETE /api/checklist-templates/<id>   — Delete
"""

from flask import Blueprint, jsonify, request

from mortgage_crm.decorators import actor_id, api_auth_required
from mortgage_crm.extensions import db
from mortgage_crm.serializers import template_dict
from mortgage_crm.services import template_service
from mortgage_crm.services.validation import require_object

templates_bp = Blueprint(
    "checklist_templates", __name__, url_prefix="/api/checklist-templates"
)


@templates_bp.route("", methods=["GET"])
@api_auth_required
def api_list_templates():
    return jsonify([template_dict(t) for t in template_service.list_templates()])


@templates_bp.route("", methods=["POST"])
@api_auth_required
def api_create_template():
    data = require_object(request.get_json(silent=True))
    template = template_service.create_template(
        data.get("name"),
        data.get("lead_type"),
        data.get("items"),
        actor_user_id=actor_id(),
    )
    db.session.commit()
    return jsonify(template_dict(template)), 201


@templates_bp.route("/<template_id>", methods=["GET"])
@api_auth_required
def api_get_template(template_id):
    return jsonify(template_dict(template_service.get_template(template_id)))


@templates_bp.route("/<template_id>", methods=["PATCH"])
@api_auth_required
def api_update_template(template_id):
    data = require_object(request.get_json(silent=True))
    template = template_service.update_template(
        template_id,
        name=data.get("name"),
        lead_type=data.get("lead_type"),
        items=data.get("items"),
        actor_user_id=actor_id(),
    )
    return jsonify(template_dict(template))


@templates_bp.route("/<template_id>", methods=["DELETE"])
@api_auth_required
def api_delete_template(template_id):
    template_service.delete_template(template_id, actor_user_id=actor_id())
    db.session.commit()
    return jsonify({"success": True})
