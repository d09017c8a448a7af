"""Checklist service — per-lead document checklists.

instantiate_checklist() deep-copies a template's items into a new
checklist in one transaction. After that the checklist and its items
have no live link to the template: labels, required flags and sort
order are frozen as of instantiation.

Item statuses (PENDING / RECEIVED / WAIVED) may move in any direction.
Changing item statuses never changes Checklist.status; that field only
moves through set_checklist_status().

Functions flush but do NOT commit — the caller commits — except
instantiate_checklist(), which owns its transaction.
"""

import logging

from mortgage_crm.errors import NotFoundError, ValidationError
from mortgage_crm.extensions import db
from mortgage_crm.models.checklist import (
    Checklist,
    ChecklistItem,
    ChecklistTemplate,
)
from mortgage_crm.models.lead import Lead
from mortgage_crm.services import audit_service
from mortgage_crm.services.transaction import atomic
from mortgage_crm.services.validation import check_choice, optional_text, require_text

logger = logging.getLogger(__name__)


def get_checklist(checklist_id):
    checklist = db.session.get(Checklist, checklist_id)
    if checklist is None:
        raise NotFoundError("Checklist not found.")
    return checklist


def get_item(item_id):
    item = db.session.get(ChecklistItem, item_id)
    if item is None:
        raise NotFoundError("Checklist item not found.")
    return item


def instantiate_checklist(lead_id, template_id, title=None, actor_user_id=None):
    """Copy a template onto a lead as a new OPEN checklist of PENDING items.

    Args:
        lead_id: Lead UUID string.
        template_id: ChecklistTemplate UUID string.
        title: Optional override; defaults to the template's name.

    Returns:
        The committed Checklist.

    Raises:
        ValidationError: template_id missing, or title given but too long.
        NotFoundError: lead or template missing (checked before any write).
        TransactionFailure: the copy failed; nothing was written.
    """
    if not template_id:
        raise ValidationError(
            "Template is required.", details={"template_id": "required"}
        )
    if optional_text(title) is not None:
        title = require_text("title", title, max_length=255)
    else:
        title = None

    lead = db.session.get(Lead, lead_id)
    if lead is None:
        raise NotFoundError("Lead not found.")
    template = db.session.get(ChecklistTemplate, template_id)
    if template is None:
        raise NotFoundError("Template not found.")

    with atomic("create checklist"):
        checklist = Checklist(
            lead_id=lead.id,
            title=title or template.name,
            status="OPEN",
            source_template_id=template.id,
        )
        for template_item in template.items:
            checklist.items.append(ChecklistItem(
                label=template_item.label,
                required=template_item.required,
                sort_order=template_item.sort_order,
                status="PENDING",
            ))
        db.session.add(checklist)
        db.session.flush()

        audit_service.record(
            "checklist.created", "lead", lead.id,
            actor_user_id=actor_user_id,
            checklist_id=checklist.id,
            template_id=template.id,
            item_count=len(checklist.items),
        )

    logger.info(
        f"Instantiated template {template.name} on lead {lead.id} "
        f"({len(checklist.items)} items)"
    )
    return checklist


def set_item_status(item_id, status):
    """Set one item's status. Any status is reachable from any other and
    repeating the current status is a successful no-op."""
    check_choice("status", status, ChecklistItem.STATUSES)
    item = get_item(item_id)

    if item.status != status:
        item.status = status
        db.session.flush()
        logger.info(f"Checklist item {item_id} -> {status}")
    return item


def set_checklist_status(checklist_id, status):
    """Manually move a checklist between OPEN / IN_PROGRESS / COMPLETE."""
    check_choice("status", status, Checklist.STATUSES)
    checklist = get_checklist(checklist_id)

    if checklist.status != status:
        checklist.status = status
        db.session.flush()
        logger.info(f"Checklist {checklist_id} -> {status}")
    return checklist


def delete_checklist(checklist_id, actor_user_id=None):
    checklist = get_checklist(checklist_id)
    lead_id = checklist.lead_id
    db.session.delete(checklist)
    db.session.flush()

    audit_service.record(
        "checklist.deleted", "lead", lead_id,
        actor_user_id=actor_user_id, checklist_id=checklist_id,
    )


def list_checklists_for_lead(lead_id):
    """Newest checklist first; items come back in sort_order."""
    return (
        Checklist.query
        .filter_by(lead_id=lead_id)
        .order_by(Checklist.created_at.desc())
        .all()
    )


def checklist_progress(checklist):
    """Read-only fulfilment counts. Never writes Checklist.status."""
    counts = {status: 0 for status in ChecklistItem.STATUSES}
    required_outstanding = 0
    for item in checklist.items:
        counts[item.status] = counts.get(item.status, 0) + 1
        if item.required and item.status == "PENDING":
            required_outstanding += 1
    return {
        "total": len(checklist.items),
        "pending": counts["PENDING"],
        "received": counts["RECEIVED"],
        "waived": counts["WAIVED"],
        "required_outstanding": required_outstanding,
    }
