"""Lead service — lifecycle of mortgage leads.

- create: validates input; stage and application_status always start at
  NEW / NOT_CONTACTED whatever the caller sends
- update: any subset of mutable fields in one write, validated up front
- delete: hard delete cascading to notes, tasks, emails, checklists and
  checklist items, in one transaction
- list / detail / referrer search: read paths with their ordering rules

referrer_id is only kept while source_type is BANK.

Functions flush but do NOT commit — the caller commits — except
delete_lead(), which owns its transaction.
"""

import logging
from datetime import datetime, timezone

from flask import current_app
from sqlalchemy import func, or_

from mortgage_crm.errors import NotFoundError, ValidationError
from mortgage_crm.extensions import db
from mortgage_crm.models.lead import Lead
from mortgage_crm.services import (
    audit_service,
    checklist_service,
    finance_service,
    note_service,
    referrer_service,
    task_service,
)
from mortgage_crm.services.email_service import list_emails
from mortgage_crm.services.transaction import atomic
from mortgage_crm.services.validation import (
    check_choice,
    optional_email,
    optional_text,
    parse_datetime,
    parse_number,
    require_text,
)

logger = logging.getLogger(__name__)

# Fields a caller may set. stage / application_status are only honoured on update.
CREATE_FIELDS = (
    ["first_name", "last_name", "email", "phone", "source_type", "referrer_id", "lead_type"]
    + Lead.DECIMAL_FIELDS
    + Lead.INTEGER_FIELDS
)
UPDATE_FIELDS = CREATE_FIELDS + ["stage", "application_status"]

# Accepted on create but always overwritten.
_CREATE_IGNORED = {"stage", "application_status"}
_READ_ONLY = {"id", "created_at", "updated_at"}


class LeadIncludes:
    """Which related collections to summarize on the lead list.

    Parsed from a comma-separated ``include`` parameter that recognizes
    ``tasks``, ``notes`` and ``checklists``; anything else is ignored.
    """

    def __init__(self, include_tasks=False, include_notes=False, include_checklists=False):
        self.include_tasks = include_tasks
        self.include_notes = include_notes
        self.include_checklists = include_checklists

    @classmethod
    def from_param(cls, value):
        names = {part.strip().lower() for part in (value or "").split(",") if part.strip()}
        return cls(
            include_tasks="tasks" in names,
            include_notes="notes" in names,
            include_checklists="checklists" in names,
        )

    def __repr__(self):
        return (
            f"<LeadIncludes tasks={self.include_tasks} notes={self.include_notes} "
            f"checklists={self.include_checklists}>"
        )


def _clean_fields(fields, allowed):
    """Validate a payload against the allowed field list.

    Returns:
        Dict of cleaned values for the keys present in ``fields``.
    """
    if not isinstance(fields, dict):
        raise ValidationError("Request body must be an object.")

    unknown = [k for k in fields if k not in allowed]
    if unknown:
        raise ValidationError(
            f"Unknown or read-only fields: {', '.join(sorted(unknown))}",
            details={k: "not_allowed" for k in unknown},
        )

    cleaned = {}
    for key, value in fields.items():
        if key in ("first_name", "last_name"):
            cleaned[key] = require_text(key, value, max_length=255)
        elif key == "email":
            cleaned[key] = optional_email(key, value)
        elif key == "phone":
            phone = optional_text(value)
            if phone and len(phone) > 50:
                raise ValidationError(
                    "Phone must be at most 50 characters.", details={key: "max_length:50"}
                )
            cleaned[key] = phone
        elif key == "source_type":
            cleaned[key] = check_choice(key, value, Lead.SOURCE_TYPES)
        elif key == "lead_type":
            cleaned[key] = check_choice(key, value, Lead.LEAD_TYPES)
        elif key == "stage":
            cleaned[key] = check_choice(key, value, Lead.STAGES)
        elif key == "application_status":
            cleaned[key] = check_choice(key, value, Lead.APPLICATION_STATUSES)
        elif key == "referrer_id":
            if value is not None and not isinstance(value, str):
                raise ValidationError(
                    "Referrer id must be a string.", details={key: "invalid_type"}
                )
            cleaned[key] = value or None
        elif key in Lead.DECIMAL_FIELDS or key in Lead.INTEGER_FIELDS:
            number = parse_number(key, value, integer=key in Lead.INTEGER_FIELDS)
            if number is not None and number < 0:
                raise ValidationError(
                    f"{key.replace('_', ' ').capitalize()} cannot be negative.",
                    details={key: "negative"},
                )
            cleaned[key] = number
    return cleaned


def _apply_referrer_rule(cleaned, current_source_type=None, current_referrer_id=None):
    """Keep referrer_id only for BANK leads; a newly given id must be an active referrer."""
    source_type = cleaned.get("source_type", current_source_type)
    if source_type != "BANK":
        if cleaned.get("referrer_id") or current_referrer_id:
            cleaned["referrer_id"] = None
        return cleaned

    new_referrer_id = cleaned.get("referrer_id")
    if new_referrer_id and new_referrer_id != current_referrer_id:
        referrer_service.require_active_referrer(new_referrer_id)
    return cleaned


def get_lead(lead_id):
    """Return the Lead or raise NotFoundError."""
    lead = db.session.get(Lead, lead_id)
    if lead is None:
        raise NotFoundError("Lead not found.")
    return lead


def create_lead(fields, actor_user_id=None):
    """Create a lead from an intake payload.

    Raises:
        ValidationError: missing names, malformed email, bad enum or number,
            unknown/inactive referrer.
    """
    if not isinstance(fields, dict):
        raise ValidationError("Request body must be an object.")
    payload = {k: v for k, v in fields.items() if k not in _CREATE_IGNORED}
    cleaned = _clean_fields(payload, CREATE_FIELDS)

    missing = [f for f in ("first_name", "last_name") if f not in cleaned]
    if missing:
        raise ValidationError(
            f"{missing[0].replace('_', ' ').capitalize()} is required.",
            details={f: "required" for f in missing},
        )
    cleaned.setdefault("source_type", "OTHER")
    cleaned.setdefault("lead_type", "PURCHASE")
    _apply_referrer_rule(cleaned)

    lead = Lead(**cleaned)
    lead.stage = "NEW"
    lead.application_status = "NOT_CONTACTED"
    db.session.add(lead)
    db.session.flush()

    audit_service.record(
        "lead.created", "lead", lead.id,
        actor_user_id=actor_user_id,
        name=lead.full_name,
        lead_type=lead.lead_type,
        source_type=lead.source_type,
    )
    logger.info(f"Created lead {lead.full_name} ({lead.id})")
    return lead


def update_lead(lead_id, fields, actor_user_id=None):
    """Apply a partial update.

    Raises:
        NotFoundError: lead missing.
        ValidationError: malformed values or read-only/unknown fields. Nothing
            is written when validation fails.
    """
    if isinstance(fields, dict):
        read_only = [k for k in fields if k in _READ_ONLY]
        if read_only:
            raise ValidationError(
                f"Fields cannot be updated: {', '.join(sorted(read_only))}",
                details={k: "read_only" for k in read_only},
            )
    cleaned = _clean_fields(fields, UPDATE_FIELDS)
    lead = get_lead(lead_id)
    _apply_referrer_rule(cleaned, lead.source_type, lead.referrer_id)

    changes = {}
    for key, value in cleaned.items():
        if getattr(lead, key) != value:
            changes[key] = value
            setattr(lead, key, value)

    if changes:
        lead.updated_at = datetime.now(timezone.utc)
        db.session.flush()
        tracked = {k: changes[k] for k in ("stage", "application_status") if k in changes}
        audit_service.record(
            "lead.updated", "lead", lead.id,
            actor_user_id=actor_user_id, fields=sorted(changes), **tracked,
        )
        logger.info(f"Updated lead {lead.id}: {', '.join(sorted(changes))}")
    return lead


def delete_lead(lead_id, actor_user_id=None):
    """Hard delete a lead and everything it owns, atomically. Irreversible."""
    lead = get_lead(lead_id)
    name = lead.full_name

    with atomic("delete lead"):
        db.session.delete(lead)
        db.session.flush()
        audit_service.record(
            "lead.deleted", "lead", lead_id,
            actor_user_id=actor_user_id, name=name,
        )

    logger.info(f"Deleted lead {name} ({lead_id})")


def get_lead_detail(lead_id):
    """Lead plus every related collection, each in its own display order."""
    lead = get_lead(lead_id)
    return {
        "lead": lead,
        "referrer": lead.referrer,
        "notes": note_service.list_notes(lead.id),
        "tasks": task_service.list_tasks(lead.id),
        "emails": list_emails(lead.id),
        "checklists": checklist_service.list_checklists_for_lead(lead.id),
    }


def list_leads(application_status=None, includes=None, limit=None):
    """Most recently updated leads, capped at LEAD_LIST_LIMIT (50).

    Returns:
        List of (lead, related) tuples. ``related`` only holds the keys
        requested through ``includes``: up to 3 nearest open tasks, the 2
        newest notes, all checklists with items.
    """
    includes = includes or LeadIncludes()
    if limit is None:
        limit = current_app.config.get("LEAD_LIST_LIMIT", 50)

    query = Lead.query
    if application_status:
        check_choice("status", application_status, Lead.APPLICATION_STATUSES)
        query = query.filter_by(application_status=application_status)

    leads = query.order_by(Lead.updated_at.desc(), Lead.created_at.desc()).limit(limit).all()

    rows = []
    for lead in leads:
        related = {}
        if includes.include_tasks:
            related["tasks"] = task_service.nearest_open_tasks(lead.id, limit=3)
        if includes.include_notes:
            related["notes"] = note_service.newest_notes(lead.id, limit=2)
        if includes.include_checklists:
            related["checklists"] = checklist_service.list_checklists_for_lead(lead.id)
        rows.append((lead, related))
    return rows


def search_referrer_leads(referrer_id, status=None, start_date=None, end_date=None, search=None):
    """All leads attributed to a referrer, filtered.

    Args:
        status: exact application_status match; None or "all" disables it.
        start_date / end_date: ISO-8601 bounds on created_at (inclusive).
        search: case-insensitive substring over first/last name and email,
            plain substring over phone.

    Returns:
        (referrer, leads) with leads newest first.

    Raises:
        NotFoundError: referrer missing. ValidationError: bad status or date.
    """
    referrer = referrer_service.get_referrer(referrer_id)

    query = Lead.query.filter(Lead.referrer_id == referrer.id)

    if status and status != "all":
        check_choice("status", status, Lead.APPLICATION_STATUSES)
        query = query.filter(Lead.application_status == status)

    start = parse_datetime("start_date", start_date)
    end = parse_datetime("end_date", end_date)
    if start is not None:
        query = query.filter(Lead.created_at >= start)
    if end is not None:
        query = query.filter(Lead.created_at <= end)

    term = (search or "").strip()
    if term:
        lowered = term.lower()
        query = query.filter(or_(
            func.lower(Lead.first_name).contains(lowered, autoescape=True),
            func.lower(Lead.last_name).contains(lowered, autoescape=True),
            func.lower(Lead.email).contains(lowered, autoescape=True),
            Lead.phone.contains(term, autoescape=True),
        ))

    leads = query.order_by(Lead.created_at.desc()).all()
    return referrer, leads


def recalculate_ratios(lead_id, actor_user_id=None):
    """Run the affordability calculator on the lead's stored inputs and save
    gds_ratio / tds_ratio (and loan_amount when it had to be derived).

    Raises:
        ValidationError: monthly_income or a loan amount cannot be determined.
    """
    lead = get_lead(lead_id)

    if not lead.monthly_income:
        raise ValidationError(
            "Monthly income is required to compute GDS/TDS.",
            details={"monthly_income": "required"},
        )
    if not lead.loan_amount and not lead.property_value:
        raise ValidationError(
            "A loan amount or property value is required to compute GDS/TDS.",
            details={"loan_amount": "required"},
        )

    result = finance_service.calculate(
        property_value=lead.property_value,
        down_payment=lead.down_payment,
        loan_amount=lead.loan_amount,
        interest_rate=lead.interest_rate,
        term_years=lead.term_years,
        monthly_income=lead.monthly_income,
        monthly_debts=lead.monthly_debts,
    )

    fields = {"gds_ratio": result["gds_ratio"], "tds_ratio": result["tds_ratio"]}
    if not lead.loan_amount:
        fields["loan_amount"] = result["loan_amount"]
    update_lead(lead.id, fields, actor_user_id=actor_user_id)
    return lead, result
