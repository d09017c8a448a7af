"""Task model — follow-ups owed on a lead (calls, emails, document chasing)."""

import uuid
from datetime import datetime, timezone

from mortgage_crm.extensions import db


class Task(db.Model):
    __tablename__ = "tasks"

    TYPES = ["CALL", "EMAIL", "DOCS_CHASE", "OTHER"]

    # -- Declared order doubles as display order (open work first) --
    STATUSES = ["OPEN", "DONE", "CANCELED"]

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    lead_id = db.Column(
        db.String(36),
        db.ForeignKey("leads.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = db.Column(db.String(500), nullable=False)
    type = db.Column(
        db.String(50), default="OTHER", nullable=False
    )  # CALL | EMAIL | DOCS_CHASE | OTHER
    due_at = db.Column(db.DateTime(timezone=True), nullable=True)
    status = db.Column(
        db.String(50), default="OPEN", nullable=False, index=True
    )  # OPEN | DONE | CANCELED
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=db.func.now(),
    )

    # --- Relationships ---
    lead = db.relationship("Lead", back_populates="tasks")

    def __repr__(self):
        return f"<Task {self.title[:30]} ({self.status})>"
