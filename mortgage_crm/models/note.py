"""Note model — free-form notes on a lead.

Displayed pinned-first, then newest-first.
"""

import uuid
from datetime import datetime, timezone

from mortgage_crm.extensions import db


class Note(db.Model):
    __tablename__ = "notes"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    lead_id = db.Column(
        db.String(36),
        db.ForeignKey("leads.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    body = db.Column(db.Text, nullable=False)
    pinned = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=db.func.now(),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=db.func.now(),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # --- Relationships ---
    lead = db.relationship("Lead", back_populates="notes")

    def __repr__(self):
        return f"<Note lead={self.lead_id} pinned={self.pinned}>"
