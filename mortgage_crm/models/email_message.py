"""EmailMessage model.

Write-once record of an outbound send attempt to a lead. Status only moves
QUEUED -> SENT or QUEUED -> FAILED.
"""

import uuid
from datetime import datetime, timezone

from mortgage_crm.extensions import db


class EmailMessage(db.Model):
    __tablename__ = "email_messages"

    STATUSES = ["QUEUED", "SENT", "FAILED"]

    # -- Valid status transitions (enforced in email_service) --
    VALID_TRANSITIONS = {
        "QUEUED": ["SENT", "FAILED"],
    }

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    lead_id = db.Column(
        db.String(36),
        db.ForeignKey("leads.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    to = db.Column(db.String(255), nullable=False)
    subject = db.Column(db.String(255), nullable=False)
    body = db.Column(db.Text, nullable=False)
    status = db.Column(
        db.String(50), default="QUEUED", nullable=False
    )  # QUEUED | SENT | FAILED
    error = db.Column(db.Text, nullable=True)  # provider error when FAILED
    sent_at = db.Column(db.DateTime(timezone=True), nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=db.func.now(),
    )

    # --- Relationships ---
    lead = db.relationship("Lead", back_populates="emails")

    def __repr__(self):
        return f"<EmailMessage to={self.to} ({self.status})>"
