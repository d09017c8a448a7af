"""JSON shapes for API responses.

Plain dict builders shared by the API blueprints. Keys are snake_case,
timestamps ISO-8601 (or None).
"""

from mortgage_crm.models.lead import Lead
from mortgage_crm.services.checklist_service import checklist_progress


def _iso(value):
    return value.isoformat() if value else None


def user_dict(user):
    return {
        "id": user.id,
        "email": user.email,
        "full_name": user.full_name,
        "is_admin": bool(user.is_admin),
    }


def referrer_dict(referrer):
    return {
        "id": referrer.id,
        "name": referrer.name,
        "is_active": referrer.is_active,
        "created_at": _iso(referrer.created_at),
        "updated_at": _iso(referrer.updated_at),
    }


def lead_dict(lead):
    data = {
        "id": lead.id,
        "first_name": lead.first_name,
        "last_name": lead.last_name,
        "email": lead.email,
        "phone": lead.phone,
        "source_type": lead.source_type,
        "referrer_id": lead.referrer_id,
        "lead_type": lead.lead_type,
        "stage": lead.stage,
        "application_status": lead.application_status,
    }
    for field in Lead.DECIMAL_FIELDS + Lead.INTEGER_FIELDS:
        data[field] = getattr(lead, field)
    data["created_at"] = _iso(lead.created_at)
    data["updated_at"] = _iso(lead.updated_at)
    return data


def note_dict(note):
    return {
        "id": note.id,
        "lead_id": note.lead_id,
        "body": note.body,
        "pinned": note.pinned,
        "created_at": _iso(note.created_at),
        "updated_at": _iso(note.updated_at),
    }


def task_dict(task):
    return {
        "id": task.id,
        "lead_id": task.lead_id,
        "title": task.title,
        "type": task.type,
        "due_at": _iso(task.due_at),
        "status": task.status,
        "created_at": _iso(task.created_at),
    }


def email_dict(email):
    return {
        "id": email.id,
        "lead_id": email.lead_id,
        "to": email.to,
        "subject": email.subject,
        "body": email.body,
        "status": email.status,
        "error": email.error,
        "sent_at": _iso(email.sent_at),
        "created_at": _iso(email.created_at),
    }


def checklist_item_dict(item):
    return {
        "id": item.id,
        "checklist_id": item.checklist_id,
        "label": item.label,
        "required": item.required,
        "sort_order": item.sort_order,
        "status": item.status,
        "updated_at": _iso(item.updated_at),
    }


def checklist_dict(checklist):
    return {
        "id": checklist.id,
        "lead_id": checklist.lead_id,
        "title": checklist.title,
        "status": checklist.status,
        "source_template_id": checklist.source_template_id,
        "progress": checklist_progress(checklist),
        "items": [checklist_item_dict(i) for i in checklist.items],
        "created_at": _iso(checklist.created_at),
        "updated_at": _iso(checklist.updated_at),
    }


def template_dict(template):
    return {
        "id": template.id,
        "name": template.name,
        "lead_type": template.lead_type,
        "item_count": len(template.items),
        "items": [
            {
                "id": item.id,
                "label": item.label,
                "required": item.required,
                "sort_order": item.sort_order,
            }
            for item in template.items
        ],
        "created_at": _iso(template.created_at),
        "updated_at": _iso(template.updated_at),
    }


def audit_event_dict(event):
    return {
        "id": event.id,
        "action": event.action,
        "entity_type": event.entity_type,
        "entity_id": event.entity_id,
        "actor_user_id": event.actor_user_id,
        "metadata": event.metadata_ or {},
        "created_at": _iso(event.created_at),
    }


def lead_detail_dict(detail):
    """Serialize lead_service.get_lead_detail() output."""
    data = lead_dict(detail["lead"])
    referrer = detail["referrer"]
    data["referrer"] = referrer_dict(referrer) if referrer is not None else None
    data["notes"] = [note_dict(n) for n in detail["notes"]]
    data["tasks"] = [task_dict(t) for t in detail["tasks"]]
    data["emails"] = [email_dict(e) for e in detail["emails"]]
    data["checklists"] = [checklist_dict(c) for c in detail["checklists"]]
    return data


def lead_list_row(lead, related):
    """One entry of the lead list: the lead plus whichever collections were requested."""
    data = lead_dict(lead)
    if "tasks" in related:
        data["tasks"] = [task_dict(t) for t in related["tasks"]]
    if "notes" in related:
        data["notes"] = [note_dict(n) for n in related["notes"]]
    if "checklists" in related:
        data["checklists"] = [checklist_dict(c) for c in related["checklists"]]
    return data
