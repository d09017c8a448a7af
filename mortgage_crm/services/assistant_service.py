"""AI assistant service — thin wrapper around Google Gemini.

Calls the generateContent REST endpoint with a system context describing
the CRM (plus the lead being viewed, when one is given) and returns the
reply text. Without GEMINI_API_KEY the assistant reports a configuration
problem instead of failing the request in some other way.
"""

import logging

import requests
from flask import current_app

from mortgage_crm.errors import IntegrationFailure
from mortgage_crm.services import lead_service
from mortgage_crm.services.validation import require_text

logger = logging.getLogger(__name__)

SYSTEM_CONTEXT = """You are an assistant inside a mortgage-lead CRM used by a broker.
The CRM tracks:
- Leads: applicants with a pipeline stage (NEW, CONTACTED, PREQUAL, DOCS_REQUESTED,
  DOCS_RECEIVED, PACKAGED, SUBMITTED, APPROVED, FUNDED, LOST) and an application
  status (NOT_CONTACTED, CONTACTED, IN_PROGRESS, CONDITIONAL_APPROVED, APPROVED).
- Referrers: bank referral sources, only used for BANK source type leads.
- Document checklists copied from templates, with items PENDING, RECEIVED or WAIVED.
- Tasks (CALL, EMAIL, DOCS_CHASE, OTHER), notes and sent emails.
- GDS/TDS ratios: housing payment, and housing payment plus other debts, over gross
  monthly income.
Answer briefly and practically. Do not invent data that is not in the context."""

MAX_PROMPT_LENGTH = 4000


def _lead_context(lead_id):
    detail = lead_service.get_lead_detail(lead_id)
    lead = detail["lead"]
    lines = [
        f"Current lead: {lead.full_name}",
        f"Type: {lead.lead_type}, source: {lead.source_type}, "
        f"stage: {lead.stage}, application status: {lead.application_status}",
    ]
    if detail["referrer"] is not None:
        lines.append(f"Referrer: {detail['referrer'].name}")
    for field in ("property_value", "down_payment", "loan_amount", "interest_rate",
                  "term_years", "monthly_income", "monthly_debts", "credit_score",
                  "gds_ratio", "tds_ratio"):
        value = getattr(lead, field)
        if value is not None:
            lines.append(f"{field}: {value}")

    open_tasks = [t for t in detail["tasks"] if t.status == "OPEN"]
    lines.append(f"Open tasks: {len(open_tasks)}")
    for task in open_tasks[:5]:
        lines.append(f"- {task.title} ({task.type})")

    for checklist in detail["checklists"]:
        pending = [i.label for i in checklist.items if i.status == "PENDING"]
        lines.append(f"Checklist '{checklist.title}': {len(pending)} pending")
        for label in pending[:10]:
            lines.append(f"- {label}")

    for note in detail["notes"][:3]:
        lines.append(f"Note: {note.body[:200]}")
    return "\n".join(lines)


def _extract_text(payload):
    candidates = payload.get("candidates") or []
    if not candidates:
        return None
    parts = (candidates[0].get("content") or {}).get("parts") or []
    text = "".join(part.get("text", "") for part in parts).strip()
    return text or None


def ask(prompt, lead_id=None):
    """Send a question to the assistant.

    Returns:
        The reply text.

    Raises:
        ValidationError: empty or oversized prompt.
        NotFoundError: lead_id given but missing.
        IntegrationFailure: no API key (configured=False), or the provider
            errored / returned nothing usable.
    """
    prompt = require_text("prompt", prompt, max_length=MAX_PROMPT_LENGTH)

    config = current_app.config
    api_key = config.get("GEMINI_API_KEY")
    if not api_key:
        logger.warning("Assistant called but GEMINI_API_KEY is not configured.")
        raise IntegrationFailure(
            "Gemini API key not configured. Set GEMINI_API_KEY and restart the server.",
            configured=False,
        )

    context = SYSTEM_CONTEXT
    if lead_id:
        context = f"{context}\n\n{_lead_context(lead_id)}"

    url = f"{config['GEMINI_API_URL'].rstrip('/')}/models/{config['GEMINI_MODEL']}:generateContent"
    body = {
        "systemInstruction": {"parts": [{"text": context}]},
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
    }

    try:
        resp = requests.post(url, params={"key": api_key}, json=body, timeout=30)
        resp.raise_for_status()
        payload = resp.json()
    except requests.RequestException as e:
        logger.error(f"Gemini request failed: {e}")
        raise IntegrationFailure("The assistant is unavailable right now.") from e
    except ValueError as e:
        logger.error(f"Gemini returned invalid JSON: {e}")
        raise IntegrationFailure("The assistant returned an unreadable response.") from e

    text = _extract_text(payload)
    if text is None:
        logger.warning(f"Gemini returned no text: {str(payload)[:200]}")
        raise IntegrationFailure("The assistant returned an empty response.")
    return text
