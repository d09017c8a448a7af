"""Checklist models.

- ChecklistTemplate / ChecklistItemTemplate: reusable document requirement
  lists, categorized by lead type.
- Checklist / ChecklistItem: a per-lead copy of a template.

A checklist is a deep copy taken at instantiation time. It keeps no
foreign key to its template (source_template_id is informational only),
so editing or deleting a template never touches existing checklists.
"""

import uuid
from datetime import datetime, timezone

from mortgage_crm.extensions import db


class ChecklistTemplate(db.Model):
    __tablename__ = "checklist_templates"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name = db.Column(db.String(255), nullable=False)
    lead_type = db.Column(
        db.String(50), nullable=False
    )  # one of Lead.LEAD_TYPES
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

    items = db.relationship(
        "ChecklistItemTemplate",
        back_populates="template",
        cascade="all, delete-orphan",
        order_by="ChecklistItemTemplate.sort_order",
    )

    def __repr__(self):
        return f"<ChecklistTemplate {self.name} ({self.lead_type})>"


class ChecklistItemTemplate(db.Model):
    __tablename__ = "checklist_item_templates"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    template_id = db.Column(
        db.String(36),
        db.ForeignKey("checklist_templates.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    label = db.Column(db.String(500), nullable=False)
    required = db.Column(db.Boolean, default=True, nullable=False)
    sort_order = db.Column(db.Integer, default=0, nullable=False)

    template = db.relationship("ChecklistTemplate", back_populates="items")

    def __repr__(self):
        return f"<ChecklistItemTemplate {self.label[:40]}>"


class Checklist(db.Model):
    __tablename__ = "checklists"

    # -- Set by hand; never derived from item statuses --
    STATUSES = ["OPEN", "IN_PROGRESS", "COMPLETE"]

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    lead_id = db.Column(
        db.String(36),
        db.ForeignKey("leads.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = db.Column(db.String(255), nullable=False)
    status = db.Column(
        db.String(50), default="OPEN", nullable=False, index=True
    )  # OPEN | IN_PROGRESS | COMPLETE
    source_template_id = db.Column(db.String(36), nullable=True)  # provenance only, no FK
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
    lead = db.relationship("Lead", back_populates="checklists")
    items = db.relationship(
        "ChecklistItem",
        back_populates="checklist",
        cascade="all, delete-orphan",
        order_by="ChecklistItem.sort_order",
    )

    def __repr__(self):
        return f"<Checklist {self.title} ({self.status})>"


class ChecklistItem(db.Model):
    __tablename__ = "checklist_items"

    # -- Any status may move to any other; no terminal state --
    STATUSES = ["PENDING", "RECEIVED", "WAIVED"]

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    checklist_id = db.Column(
        db.String(36),
        db.ForeignKey("checklists.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    label = db.Column(db.String(500), nullable=False)
    required = db.Column(db.Boolean, default=True, nullable=False)
    sort_order = db.Column(db.Integer, default=0, nullable=False)
    status = db.Column(
        db.String(50), default="PENDING", nullable=False
    )  # PENDING | RECEIVED | WAIVED
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=db.func.now(),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    checklist = db.relationship("Checklist", back_populates="items")

    def __repr__(self):
        return f"<ChecklistItem {self.label[:40]} ({self.status})>"
