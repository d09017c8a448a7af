"""Audit event model.

Logs significant writes (lead created/deleted, checklist instantiated,
template items replaced, referrer deactivated, email sent...) for the
activity feed and debugging.

entity_type/entity_id are plain strings, not foreign keys, so the trail
survives hard deletes of the audited lead.
"""

import uuid
from datetime import datetime, timezone

from mortgage_crm.extensions import db


class AuditEvent(db.Model):
    __tablename__ = "audit_events"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    actor_user_id = db.Column(
        db.String(36), db.ForeignKey("users.id"), nullable=True
    )
    entity_type = db.Column(db.String(50), nullable=False)  # lead | referrer | checklist | ...
    entity_id = db.Column(db.String(36), nullable=True, index=True)
    action = db.Column(db.String(255), nullable=False)  # e.g. "lead.created"
    metadata_ = db.Column(
        "metadata", db.JSON, default=dict
    )  # extra context, named metadata_ to avoid Python builtin clash
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=db.func.now(),
    )

    # --- Relationships ---
    actor = db.relationship("User", back_populates="audit_events")

    def __repr__(self):
        return f"<AuditEvent {self.action}>"
