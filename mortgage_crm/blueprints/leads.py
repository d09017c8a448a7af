"""Leads blueprint — /api/leads/*

Lead intake, pipeline updates and everything hanging off a lead.

Route Map:
  GET    /api/leads                         — List (?status=, ?include=tasks,notes,checklists)
  POST   /api/leads                         — Create
  GET    /api/leads/<id>                    — Detail with notes, tasks, emails, checklists
  PATCH  /api/leads/<id>                    — Partial update
  DELETE /api/leads/<id>                    — Hard delete (cascades)
  POST   /api/leads/<id>/recalculate        — Recompute and save GDS/TDS
  GET    /api/leads/<id>/notes              — Notes, pinned first
  POST   /api/leads/<id>/notes              — Add note
  GET    /api/leads/<id>/tasks              — Tasks, open first
  POST   /api/leads/<id>/tasks              — Add task
  GET    /api/leads/<id>/emails             — Email history
  POST   /api/leads/<id>/emails             — Send email (201 SENT, 502 FAILED)
  GET    /api/leads/<id>/checklists         — Checklists with items
  POST   /api/leads/<id>/checklists         — Instantiate a template
"""

import logging

from flask import Blueprint, jsonify, request

from mortgage_crm.decorators import actor_id, api_auth_required
from mortgage_crm.extensions import db, limiter
from mortgage_crm.serializers import (
    checklist_dict,
    email_dict,
    lead_detail_dict,
    lead_dict,
    lead_list_row,
    note_dict,
    task_dict,
)
from mortgage_crm.services import (
    checklist_service,
    email_service,
    lead_service,
    note_service,
    task_service,
)
from mortgage_crm.services.validation import require_object

logger = logging.getLogger(__name__)

leads_bp = Blueprint("leads", __name__, url_prefix="/api/leads")


# ─── Leads ───────────────────────────────────────────────────────

@leads_bp.route("", methods=["GET"])
@api_auth_required
def api_list_leads():
    includes = lead_service.LeadIncludes.from_param(request.args.get("include"))
    rows = lead_service.list_leads(
        application_status=request.args.get("status") or None,
        includes=includes,
    )
    return jsonify([lead_list_row(lead, related) for lead, related in rows])


@leads_bp.route("", methods=["POST"])
@api_auth_required
def api_create_lead():
    data = request.get_json(silent=True)
    lead = lead_service.create_lead(data, actor_user_id=actor_id())
    db.session.commit()

    # Staff notification is best-effort; the lead is already saved.
    try:
        email_service.notify_new_lead(lead)
    except Exception as e:
        logger.error(f"New lead notification failed for {lead.id}: {e}")

    return jsonify(lead_dict(lead)), 201


@leads_bp.route("/<lead_id>", methods=["GET"])
@api_auth_required
def api_get_lead(lead_id):
    return jsonify(lead_detail_dict(lead_service.get_lead_detail(lead_id)))


@leads_bp.route("/<lead_id>", methods=["PATCH"])
@api_auth_required
def api_update_lead(lead_id):
    data = request.get_json(silent=True)
    lead = lead_service.update_lead(lead_id, data, actor_user_id=actor_id())
    db.session.commit()
    return jsonify(lead_dict(lead))


@leads_bp.route("/<lead_id>", methods=["DELETE"])
@api_auth_required
def api_delete_lead(lead_id):
    lead_service.delete_lead(lead_id, actor_user_id=actor_id())
    return jsonify({"success": True})


@leads_bp.route("/<lead_id>/recalculate", methods=["POST"])
@api_auth_required
def api_recalculate(lead_id):
    lead, result = lead_service.recalculate_ratios(lead_id, actor_user_id=actor_id())
    db.session.commit()
    return jsonify({"lead": lead_dict(lead), "calculation": result})


# ─── Notes ───────────────────────────────────────────────────────

@leads_bp.route("/<lead_id>/notes", methods=["GET"])
@api_auth_required
def api_list_notes(lead_id):
    lead_service.get_lead(lead_id)
    return jsonify([note_dict(n) for n in note_service.list_notes(lead_id)])


@leads_bp.route("/<lead_id>/notes", methods=["POST"])
@api_auth_required
def api_create_note(lead_id):
    data = require_object(request.get_json(silent=True))
    note = note_service.create_note(
        lead_id, data.get("body"), pinned=data.get("pinned", False)
    )
    db.session.commit()
    return jsonify(note_dict(note)), 201


# ─── Tasks ───────────────────────────────────────────────────────

@leads_bp.route("/<lead_id>/tasks", methods=["GET"])
@api_auth_required
def api_list_tasks(lead_id):
    lead_service.get_lead(lead_id)
    return jsonify([task_dict(t) for t in task_service.list_tasks(lead_id)])


@leads_bp.route("/<lead_id>/tasks", methods=["POST"])
@api_auth_required
def api_create_task(lead_id):
    data = require_object(request.get_json(silent=True))
    task = task_service.create_task(
        lead_id,
        data.get("title"),
        type=data.get("type") or "OTHER",
        due_at=data.get("due_at"),
    )
    db.session.commit()
    return jsonify(task_dict(task)), 201


# ─── Emails ──────────────────────────────────────────────────────

@leads_bp.route("/<lead_id>/emails", methods=["GET"])
@api_auth_required
def api_list_emails(lead_id):
    lead_service.get_lead(lead_id)
    return jsonify([email_dict(e) for e in email_service.list_emails(lead_id)])


@leads_bp.route("/<lead_id>/emails", methods=["POST"])
@api_auth_required
@limiter.limit("20 per minute")
def api_send_email(lead_id):
    data = require_object(request.get_json(silent=True))
    email = email_service.send_lead_email(
        lead_id,
        to=data.get("to"),
        subject=data.get("subject"),
        body=data.get("body"),
        actor_user_id=actor_id(),
    )
    if email.status == "SENT":
        return jsonify(email_dict(email)), 201
    return jsonify({"error": "Failed to send email.", "details": email_dict(email)}), 502


# ─── Checklists ──────────────────────────────────────────────────

@leads_bp.route("/<lead_id>/checklists", methods=["GET"])
@api_auth_required
def api_list_checklists(lead_id):
    lead_service.get_lead(lead_id)
    checklists = checklist_service.list_checklists_for_lead(lead_id)
    return jsonify([checklist_dict(c) for c in checklists])


@leads_bp.route("/<lead_id>/checklists", methods=["POST"])
@api_auth_required
def api_create_checklist(lead_id):
    data = require_object(request.get_json(silent=True))
    checklist = checklist_service.instantiate_checklist(
        lead_id,
        data.get("template_id"),
        title=data.get("title"),
        actor_user_id=actor_id(),
    )
    return jsonify(checklist_dict(checklist)), 201
