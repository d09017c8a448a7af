"""Audit trail helpers.

record() adds an AuditEvent to the current session without committing;
it rides along with whatever transaction the calling service is in.
"""

from mortgage_crm.extensions import db
from mortgage_crm.models.audit import AuditEvent


def record(action, entity_type, entity_id=None, actor_user_id=None, **metadata):
    """Add an audit row, e.g. record("lead.created", "lead", lead.id, name="Jane Doe")."""
    event = AuditEvent(
        actor_user_id=actor_user_id,
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        metadata_=metadata,
    )
    db.session.add(event)
    return event


def recent_events(limit=20, entity_type=None, entity_id=None):
    """Newest audit events, optionally narrowed to one entity."""
    query = AuditEvent.query
    if entity_type:
        query = query.filter_by(entity_type=entity_type)
    if entity_id:
        query = query.filter_by(entity_id=entity_id)
    return query.order_by(AuditEvent.created_at.desc()).limit(limit).all()
