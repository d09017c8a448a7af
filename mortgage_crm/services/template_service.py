"""Checklist template service — the catalog of document requirement lists.

Templates are authored independently of leads. Updating a template's
items replaces the whole set (delete all, then insert) inside atomic(),
so a failure partway leaves the previous item set untouched.

Functions flush but do NOT commit — the caller commits — except
update_template(), which owns its transaction.
"""

import logging

from mortgage_crm.errors import NotFoundError, ValidationError
from mortgage_crm.extensions import db
from mortgage_crm.models.checklist import ChecklistItemTemplate, ChecklistTemplate
from mortgage_crm.models.lead import Lead
from mortgage_crm.services import audit_service
from mortgage_crm.services.transaction import atomic
from mortgage_crm.services.validation import (
    check_bool,
    check_choice,
    parse_number,
    require_text,
)

logger = logging.getLogger(__name__)


# Standard document requirements seeded into an empty catalog.
_COMMON_ITEMS = [
    ("Notice of Assessment (NOA) - Last 2 years", True),
    ("Pay stubs - Last 30 days", True),
    ("Employment letter - Current position", True),
    ("Bank statements - Last 3 months", True),
    ("Credit report consent", True),
    ("Identification (Driver's License/Passport)", True),
    ("Proof of address (Utility bill)", True),
]

DEFAULT_TEMPLATES = [
    ("Purchase Application Documents", "PURCHASE", _COMMON_ITEMS + [
        ("Property purchase agreement", True),
        ("Property appraisal report", True),
        ("Down payment proof/bank draft", True),
        ("Mortgage pre-approval letter", True),
        ("Divorce decree (if applicable)", False),
    ]),
    ("Refinance Application Documents", "REFINANCE", _COMMON_ITEMS + [
        ("Current mortgage statement", True),
        ("Property tax assessment", True),
        ("Property appraisal report (if required)", False),
        ("Home insurance policy", True),
        ("Property title/deed", True),
        ("Divorce decree (if applicable)", False),
    ]),
    ("Renewal Application Documents", "RENEWAL", _COMMON_ITEMS + [
        ("Current mortgage statement", True),
        ("Property tax assessment", True),
        ("Home insurance policy", True),
        ("Property title/deed", False),
        ("Divorce decree (if applicable)", False),
    ]),
    ("Equity Line Application Documents", "EQUITY_LINE", _COMMON_ITEMS + [
        ("Current mortgage statement", True),
        ("Property tax assessment", True),
        ("Property appraisal report", True),
        ("Home insurance policy", True),
        ("Property title/deed", True),
        ("Equity line purpose statement", True),
        ("Divorce decree (if applicable)", False),
    ]),
    ("General Application Documents", "OTHER", _COMMON_ITEMS + [
        ("Additional documents as required", False),
        ("Divorce decree (if applicable)", False),
    ]),
]


def _clean_items(items):
    """Validate a list of item payloads.

    Each item is {"label": str, "required"?: bool, "sort_order"?: int};
    sort_order defaults to the item's position in the list.

    Returns:
        List of dicts ready to become ChecklistItemTemplate rows.
    """
    if not isinstance(items, list) or not items:
        raise ValidationError(
            "At least one checklist item is required.",
            details={"items": "min_length:1"},
        )

    cleaned = []
    for index, item in enumerate(items):
        field = f"items[{index}]"
        if not isinstance(item, dict):
            raise ValidationError(
                "Each checklist item must be an object.",
                details={field: "invalid_type"},
            )
        label = require_text(f"{field}.label", item.get("label"), max_length=500)
        required = item.get("required", True)
        check_bool(f"{field}.required", required)
        sort_order = parse_number(f"{field}.sort_order", item.get("sort_order"), integer=True)
        cleaned.append({
            "label": label,
            "required": required,
            "sort_order": index if sort_order is None else sort_order,
        })
    return cleaned


def _insert_item_templates(template, cleaned_items):
    for data in cleaned_items:
        template.items.append(ChecklistItemTemplate(**data))
    db.session.flush()


def get_template(template_id):
    template = db.session.get(ChecklistTemplate, template_id)
    if template is None:
        raise NotFoundError("Template not found.")
    return template


def create_template(name, lead_type, items, actor_user_id=None):
    """Create a template with at least one item.

    Raises:
        ValidationError: empty name, unknown lead type, no items, item without label.
    """
    name = require_text("name", name, max_length=255)
    check_choice("lead_type", lead_type, Lead.LEAD_TYPES)
    cleaned = _clean_items(items)

    template = ChecklistTemplate(name=name, lead_type=lead_type)
    db.session.add(template)
    _insert_item_templates(template, cleaned)

    audit_service.record(
        "template.created", "checklist_template", template.id,
        actor_user_id=actor_user_id, name=name, item_count=len(cleaned),
    )
    logger.info(f"Created checklist template {name} with {len(cleaned)} items")
    return template


def update_template(template_id, name=None, lead_type=None, items=None, actor_user_id=None):
    """Update scalar fields and, when items is given, replace the item set.

    Runs as one transaction and commits. Existing checklists are never
    affected; they hold their own copies.

    Raises:
        NotFoundError, ValidationError (before any write),
        TransactionFailure (replacement failed; prior items retained).
    """
    if name is not None:
        name = require_text("name", name, max_length=255)
    if lead_type is not None:
        check_choice("lead_type", lead_type, Lead.LEAD_TYPES)
    cleaned = _clean_items(items) if items is not None else None

    template = get_template(template_id)

    with atomic("update checklist template"):
        if name is not None:
            template.name = name
        if lead_type is not None:
            template.lead_type = lead_type

        if cleaned is not None:
            template.items.clear()
            db.session.flush()
            _insert_item_templates(template, cleaned)

        audit_service.record(
            "template.updated", "checklist_template", template.id,
            actor_user_id=actor_user_id,
            name=template.name,
            items_replaced=cleaned is not None,
        )

    logger.info(f"Updated checklist template {template_id}")
    return template


def delete_template(template_id, actor_user_id=None):
    """Delete a template and its item templates. Checklists already
    instantiated from it are untouched."""
    template = get_template(template_id)
    name = template.name
    db.session.delete(template)
    db.session.flush()

    audit_service.record(
        "template.deleted", "checklist_template", template_id,
        actor_user_id=actor_user_id, name=name,
    )
    logger.info(f"Deleted checklist template {name} ({template_id})")


def list_templates():
    """All templates ordered by name ascending."""
    return ChecklistTemplate.query.order_by(ChecklistTemplate.name.asc()).all()


def seed_default_templates():
    """Create the standard templates when the catalog is empty.

    Returns:
        Number of templates created (0 if the catalog already had any).
    """
    if ChecklistTemplate.query.count() > 0:
        logger.info("Checklist templates already exist, skipping seed")
        return 0

    for name, lead_type, rows in DEFAULT_TEMPLATES:
        items = [
            {"label": label, "required": required, "sort_order": position}
            for position, (label, required) in enumerate(rows, start=1)
        ]
        create_template(name, lead_type, items)

    return len(DEFAULT_TEMPLATES)
