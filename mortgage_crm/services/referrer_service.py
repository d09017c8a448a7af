"""Referrer service — registry of bank referral sources.

Names are unique. A referrer is never physically deleted; deactivating it
keeps every historical lead's referrer_id valid. Registering a name that
belongs to an inactive referrer brings that row back instead of creating
a duplicate.

Functions flush but do NOT commit — the caller commits.
"""

import logging

from mortgage_crm.errors import ConflictError, NotFoundError, ValidationError
from mortgage_crm.extensions import db
from mortgage_crm.models.referrer import Referrer
from mortgage_crm.services import audit_service
from mortgage_crm.services.validation import check_bool, require_text

logger = logging.getLogger(__name__)


def _clean_name(name):
    return require_text("name", name, max_length=Referrer.NAME_MAX_LENGTH)


def get_referrer(referrer_id):
    """Return the Referrer or raise NotFoundError."""
    referrer = db.session.get(Referrer, referrer_id)
    if referrer is None:
        raise NotFoundError("Referrer not found.")
    return referrer


def create_referrer(name, actor_user_id=None):
    """Register a referrer by name.

    Returns:
        (referrer, created) — created is False when an inactive referrer
        with the same name was reactivated.

    Raises:
        ValidationError: name empty or longer than 100 characters.
        ConflictError: an active referrer already has this name.
    """
    name = _clean_name(name)

    existing = Referrer.query.filter_by(name=name).first()
    if existing is not None:
        if existing.is_active:
            raise ConflictError("Referrer with this name already exists.")
        existing.is_active = True
        db.session.flush()
        audit_service.record(
            "referrer.reactivated", "referrer", existing.id,
            actor_user_id=actor_user_id, name=name,
        )
        logger.info(f"Reactivated referrer {name} ({existing.id})")
        return existing, False

    referrer = Referrer(name=name, is_active=True)
    db.session.add(referrer)
    db.session.flush()

    audit_service.record(
        "referrer.created", "referrer", referrer.id,
        actor_user_id=actor_user_id, name=name,
    )
    logger.info(f"Created referrer {name} ({referrer.id})")
    return referrer, True


def update_referrer(referrer_id, name=None, is_active=None, actor_user_id=None):
    """Partially update a referrer's name and/or active flag.

    Raises:
        NotFoundError, ValidationError, ConflictError (rename onto a taken name).
    """
    referrer = get_referrer(referrer_id)

    if name is not None:
        name = _clean_name(name)
    if is_active is not None:
        check_bool("is_active", is_active)

    if name is not None and name != referrer.name:
        clash = Referrer.query.filter(
            Referrer.name == name, Referrer.id != referrer.id
        ).first()
        if clash is not None:
            raise ConflictError("Referrer with this name already exists.")
        referrer.name = name
    if is_active is not None:
        referrer.is_active = is_active

    db.session.flush()
    audit_service.record(
        "referrer.updated", "referrer", referrer.id,
        actor_user_id=actor_user_id, name=referrer.name, is_active=referrer.is_active,
    )
    return referrer


def deactivate_referrer(referrer_id, actor_user_id=None):
    """Soft delete: flip is_active off. Leads keep pointing at the row."""
    referrer = get_referrer(referrer_id)
    if referrer.is_active:
        referrer.is_active = False
        db.session.flush()
        audit_service.record(
            "referrer.deactivated", "referrer", referrer.id,
            actor_user_id=actor_user_id, name=referrer.name,
        )
        logger.info(f"Deactivated referrer {referrer.name} ({referrer.id})")
    return referrer


def list_referrers(active_only=True):
    """Referrers ordered by name ascending."""
    query = Referrer.query
    if active_only:
        query = query.filter_by(is_active=True)
    return query.order_by(Referrer.name.asc()).all()


def require_active_referrer(referrer_id):
    """Used when attaching a referrer to a lead. Raises ValidationError, not 404,
    because the bad id arrives as a field of the lead payload."""
    referrer = db.session.get(Referrer, referrer_id)
    if referrer is None:
        raise ValidationError(
            "Referrer not found.", details={"referrer_id": "not_found"}
        )
    if not referrer.is_active:
        raise ValidationError(
            "Referrer is inactive.", details={"referrer_id": "inactive"}
        )
    return referrer
