"""Lead model.

A prospective mortgage applicant. Two independent axes:
  stage              — where the lead sits in the sales/processing pipeline
  application_status — how far the underwriting decision has progressed

Pipeline: NEW -> CONTACTED -> PREQUAL -> DOCS_REQUESTED -> DOCS_RECEIVED
          -> PACKAGED -> SUBMITTED -> APPROVED -> FUNDED | LOST

A lead owns its notes, tasks, emails and checklists; deleting the lead
deletes all of them.
"""

import uuid
from datetime import datetime, timezone

from mortgage_crm.extensions import db


class Lead(db.Model):
    __tablename__ = "leads"

    SOURCE_TYPES = ["BANK", "ONLINE", "SELF_SOURCE", "OTHER"]

    LEAD_TYPES = ["PURCHASE", "REFINANCE", "RENEWAL", "EQUITY_LINE", "OTHER"]

    STAGES = [
        "NEW",
        "CONTACTED",
        "PREQUAL",
        "DOCS_REQUESTED",
        "DOCS_RECEIVED",
        "PACKAGED",
        "SUBMITTED",
        "APPROVED",
        "FUNDED",
        "LOST",
    ]

    APPLICATION_STATUSES = [
        "NOT_CONTACTED",
        "CONTACTED",
        "IN_PROGRESS",
        "CONDITIONAL_APPROVED",
        "APPROVED",
    ]

    # -- Optional numeric inputs, in calculator order --
    DECIMAL_FIELDS = [
        "property_value",
        "down_payment",
        "loan_amount",
        "interest_rate",
        "monthly_income",
        "monthly_debts",
        "gds_ratio",
        "tds_ratio",
    ]
    INTEGER_FIELDS = ["term_years", "credit_score"]

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    first_name = db.Column(db.String(255), nullable=False)
    last_name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=True)
    phone = db.Column(db.String(50), nullable=True)
    source_type = db.Column(
        db.String(50), default="OTHER", nullable=False
    )  # BANK | ONLINE | SELF_SOURCE | OTHER
    referrer_id = db.Column(
        db.String(36),
        db.ForeignKey("referrers.id"),
        nullable=True,
        index=True,
    )  # only kept when source_type == BANK
    lead_type = db.Column(db.String(50), default="PURCHASE", nullable=False)
    stage = db.Column(db.String(50), default="NEW", nullable=False)
    application_status = db.Column(
        db.String(50), default="NOT_CONTACTED", nullable=False, index=True
    )

    # --- Financials (all optional) ---
    property_value = db.Column(db.Float, nullable=True)
    down_payment = db.Column(db.Float, nullable=True)
    loan_amount = db.Column(db.Float, nullable=True)
    interest_rate = db.Column(db.Float, nullable=True)  # annual, percent
    term_years = db.Column(db.Integer, nullable=True)
    monthly_income = db.Column(db.Float, nullable=True)
    monthly_debts = db.Column(db.Float, nullable=True)
    credit_score = db.Column(db.Integer, nullable=True)
    gds_ratio = db.Column(db.Float, nullable=True)  # percent
    tds_ratio = db.Column(db.Float, nullable=True)  # percent

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
        index=True,
    )

    # --- Relationships ---
    referrer = db.relationship("Referrer", back_populates="leads")
    notes = db.relationship(
        "Note",
        back_populates="lead",
        cascade="all, delete-orphan",
    )
    tasks = db.relationship(
        "Task",
        back_populates="lead",
        cascade="all, delete-orphan",
    )
    emails = db.relationship(
        "EmailMessage",
        back_populates="lead",
        cascade="all, delete-orphan",
    )
    checklists = db.relationship(
        "Checklist",
        back_populates="lead",
        cascade="all, delete-orphan",
    )

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self):
        return f"<Lead {self.full_name} ({self.stage}/{self.application_status})>"
