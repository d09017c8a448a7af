"""Note service — free-form notes on a lead.

Note bodies are sanitized with bleach.clean() to strip HTML tags.
Listing order is pinned first, then newest first.

Functions flush but do NOT commit — the caller commits.
"""

import logging

from mortgage_crm.errors import NotFoundError
from mortgage_crm.extensions import db
from mortgage_crm.models.lead import Lead
from mortgage_crm.models.note import Note
from mortgage_crm.services.validation import check_bool, require_text

logger = logging.getLogger(__name__)


def get_note(note_id):
    note = db.session.get(Note, note_id)
    if note is None:
        raise NotFoundError("Note not found.")
    return note


def create_note(lead_id, body, pinned=False):
    """Add a note to a lead.

    Raises:
        ValidationError: body empty after sanitizing, pinned not a bool.
        NotFoundError: lead does not exist.
    """
    body = require_text("body", body, clean=True)
    check_bool("pinned", pinned)

    if db.session.get(Lead, lead_id) is None:
        raise NotFoundError("Lead not found.")

    note = Note(lead_id=lead_id, body=body, pinned=pinned)
    db.session.add(note)
    db.session.flush()

    logger.info(f"Created note {note.id} on lead {lead_id}")
    return note


def update_note(note_id, body=None, pinned=None):
    """Edit a note's body and/or pin flag. Omitted arguments stay as they are."""
    if body is not None:
        body = require_text("body", body, clean=True)
    if pinned is not None:
        check_bool("pinned", pinned)

    note = get_note(note_id)
    if body is not None:
        note.body = body
    if pinned is not None:
        note.pinned = pinned
    db.session.flush()
    return note


def delete_note(note_id):
    note = get_note(note_id)
    db.session.delete(note)
    db.session.flush()
    logger.info(f"Deleted note {note_id}")


def list_notes(lead_id):
    return (
        Note.query
        .filter_by(lead_id=lead_id)
        .order_by(Note.pinned.desc(), Note.created_at.desc())
        .all()
    )


def newest_notes(lead_id, limit=2):
    """Most recent notes regardless of pin — the lead list summary."""
    return (
        Note.query
        .filter_by(lead_id=lead_id)
        .order_by(Note.created_at.desc())
        .limit(limit)
        .all()
    )
