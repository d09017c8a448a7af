"""
Outbound email for the CRM.

Uses SMTP (smtp.gmail.com by default) to send plain-text emails to leads.
Every send to a lead is recorded as an EmailMessage: the row is committed
as QUEUED before the SMTP call, then moved to SENT or FAILED. A missing
SMTP configuration counts as a failed send, never as a crash.

Usage:
    from mortgage_crm.services.email_service import send_lead_email

    email = send_lead_email(
        lead_id=lead.id,
        to="jane@example.com",
        subject="Documents needed",
        body="Hi Jane, ...",
    )
    email.status  # "SENT" or "FAILED"
"""

import logging
import smtplib
import threading
from datetime import datetime, timezone
from email.mime.text import MIMEText

from flask import current_app

from mortgage_crm.errors import NotFoundError, ValidationError
from mortgage_crm.extensions import db
from mortgage_crm.models.email_message import EmailMessage
from mortgage_crm.models.lead import Lead
from mortgage_crm.services import audit_service
from mortgage_crm.services.validation import optional_email, require_text

logger = logging.getLogger(__name__)


def _send_smtp(app, msg):
    """Send a message over SMTP.

    Returns:
        None on success, otherwise a short error string.
    """
    host = app.config.get("MAIL_SMTP_HOST", "smtp.gmail.com")
    port = app.config.get("MAIL_SMTP_PORT", 587)
    username = app.config.get("MAIL_USERNAME")
    password = app.config.get("MAIL_PASSWORD")

    if not username or not password:
        logger.warning("Email not sent — MAIL_USERNAME or MAIL_PASSWORD not configured.")
        return "Email delivery is not configured."

    try:
        with smtplib.SMTP(host, port, timeout=30) as server:
            server.ehlo()
            server.starttls()
            server.ehlo()
            server.login(username, password)
            server.send_message(msg)
        logger.info(f"Email sent to {msg['To']} — {msg['Subject']}")
        return None
    except Exception as e:
        logger.error(f"Failed to send email to {msg['To']}: {e}")
        return str(e) or e.__class__.__name__


def _build_message(app, to, subject, body):
    from_name = app.config.get("MAIL_FROM_NAME", "Mortgage Helper")
    from_email = app.config.get("MAIL_FROM_ADDRESS") or app.config.get("MAIL_USERNAME") or ""

    msg = MIMEText(body, "plain")
    msg["Subject"] = subject
    msg["From"] = f"{from_name} <{from_email}>"
    msg["To"] = to
    return msg


def _transition(email, new_status, error=None):
    allowed = EmailMessage.VALID_TRANSITIONS.get(email.status, [])
    if new_status not in allowed:
        raise ValueError(
            f"Cannot move email {email.id} from {email.status} to {new_status}."
        )
    email.status = new_status
    if new_status == "SENT":
        email.sent_at = datetime.now(timezone.utc)
    if error:
        email.error = error


def send_lead_email(lead_id, to, subject, body, actor_user_id=None):
    """Send an email to a lead and record the attempt.

    Commits twice: once for the QUEUED row (so the attempt is on record
    even if the process dies mid-send) and once for the outcome.

    Returns:
        The EmailMessage, status SENT or FAILED.

    Raises:
        ValidationError: bad recipient, empty subject or body.
        NotFoundError: lead does not exist.
    """
    to = optional_email("to", to)
    if to is None:
        raise ValidationError("Recipient is required.", details={"to": "required"})
    subject = require_text("subject", subject, max_length=255)
    body = require_text("body", body)

    if db.session.get(Lead, lead_id) is None:
        raise NotFoundError("Lead not found.")

    email = EmailMessage(
        lead_id=lead_id, to=to, subject=subject, body=body, status="QUEUED"
    )
    db.session.add(email)
    db.session.commit()

    app = current_app._get_current_object()
    error = _send_smtp(app, _build_message(app, to, subject, body))

    if error is None:
        _transition(email, "SENT")
    else:
        _transition(email, "FAILED", error=error)

    audit_service.record(
        f"email.{email.status.lower()}", "lead", lead_id,
        actor_user_id=actor_user_id, email_id=email.id, to=to,
    )
    db.session.commit()
    return email


def list_emails(lead_id):
    """Email history for a lead, newest first."""
    return (
        EmailMessage.query
        .filter_by(lead_id=lead_id)
        .order_by(EmailMessage.created_at.desc())
        .all()
    )


def _send_in_background(app, msg):
    with app.app_context():
        _send_smtp(app, msg)


def notify_new_lead(lead):
    """Tell staff about a new lead (LEAD_NOTIFY_TO). Fire-and-forget in a
    background thread; failures are logged and never reach the caller."""
    app = current_app._get_current_object()
    recipient = app.config.get("LEAD_NOTIFY_TO")
    if not recipient:
        return False

    body = (
        f"New {lead.lead_type.lower().replace('_', ' ')} lead: {lead.full_name}\n"
        f"Email: {lead.email or '-'}\n"
        f"Phone: {lead.phone or '-'}\n"
        f"Source: {lead.source_type}\n"
    )
    msg = _build_message(app, recipient, f"New lead — {lead.full_name}", body)

    thread = threading.Thread(target=_send_in_background, args=(app, msg))
    thread.daemon = True
    thread.start()
    return True
