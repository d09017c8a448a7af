"""Referrer model.

Bank referral sources that send leads in. Referrers are never physically
deleted: "delete" flips is_active so historical leads keep a valid
referrer_id.
"""

import uuid
from datetime import datetime, timezone

from mortgage_crm.extensions import db


class Referrer(db.Model):
    __tablename__ = "referrers"

    NAME_MAX_LENGTH = 100

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name = db.Column(db.String(NAME_MAX_LENGTH), unique=True, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
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
    leads = db.relationship("Lead", back_populates="referrer", lazy="dynamic")

    def __repr__(self):
        return f"<Referrer {self.name} ({'active' if self.is_active else 'inactive'})>"
