"""Input validation helpers shared by the services.

Every helper raises ValidationError with a field-level ``details`` dict so
the API can point at the offending field. Free-form text (note bodies,
task titles) is run through bleach.clean() to strip HTML tags before it
is stored.
"""

import re
from datetime import datetime, timezone

import bleach

from mortgage_crm.errors import ValidationError

# Simple email regex — not exhaustive, just sanity-check
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def sanitize(text):
    """Strip all HTML tags from user input."""
    if text is None:
        return text
    return bleach.clean(str(text), tags=[], strip=True).strip()


def require_text(field, value, max_length=None, clean=False):
    """Return stripped, non-empty text or raise. clean=True also strips HTML."""
    if value is not None and not isinstance(value, str):
        raise ValidationError(
            f"{_label(field)} must be a string.", details={field: "invalid_type"}
        )
    text = (sanitize(value) if clean else value.strip()) if value is not None else ""
    if not text:
        raise ValidationError(
            f"{_label(field)} is required.", details={field: "required"}
        )
    if max_length is not None and len(text) > max_length:
        raise ValidationError(
            f"{_label(field)} must be at most {max_length} characters.",
            details={field: f"max_length:{max_length}"},
        )
    return text


def optional_text(value):
    """Stripped text, with blank strings collapsed to None."""
    if value is None:
        return None
    return str(value).strip() or None


def optional_email(field, value):
    """Lower-cased email, None for blank, ValidationError when malformed."""
    email = str(value or "").strip()
    if not email:
        return None
    if not EMAIL_RE.match(email):
        raise ValidationError(
            f"{_label(field)} is not a valid email address.",
            details={field: "invalid_email"},
        )
    return email.lower()


def check_choice(field, value, choices):
    """Raise unless value is one of choices."""
    if value not in choices:
        raise ValidationError(
            f"Invalid {field.replace('_', ' ')} '{value}'. "
            f"Must be one of: {', '.join(choices)}",
            details={field: "invalid_choice"},
        )
    return value


def check_bool(field, value):
    if not isinstance(value, bool):
        raise ValidationError(
            f"{_label(field)} must be true or false.",
            details={field: "invalid_boolean"},
        )
    return value


def parse_number(field, value, integer=False):
    """Coerce a JSON number (or numeric string) to float/int. None passes through.

    Booleans are rejected even though Python treats them as ints.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(
            f"{_label(field)} must be a number.", details={field: "invalid_number"}
        )
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(
            f"{_label(field)} must be a number.", details={field: "invalid_number"}
        )
    if number != number or number in (float("inf"), float("-inf")):
        raise ValidationError(
            f"{_label(field)} must be a finite number.",
            details={field: "invalid_number"},
        )
    if integer:
        if not number.is_integer():
            raise ValidationError(
                f"{_label(field)} must be a whole number.",
                details={field: "invalid_integer"},
            )
        return int(number)
    return number


def parse_datetime(field, value):
    """Parse an ISO-8601 string into an aware datetime (UTC when no offset).

    Accepts a trailing "Z". Datetime instances pass through. None/"" -> None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(
                f"{_label(field)} must be an ISO-8601 date or datetime.",
                details={field: "invalid_datetime"},
            )
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _label(field):
    return field.replace("_", " ").capitalize()


def require_object(data):
    """A JSON request body as a dict. No body at all counts as empty."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be an object.")
    return data
