"""Form payload presence checks.

The submission client never validates payloads; the calling form does.
These checks are what the bundled CLI form runs before submitting.

Constants:
    FORM_REQUIRED_FIELDS: Required fields keyed by form_type
    DEFAULT_REQUIRED_FIELDS: Required fields for unknown form types

Functions:
    validate_payload: Return {field: message} for every problem found
"""
import re

DEFAULT_REQUIRED_FIELDS = ["email"]

FORM_REQUIRED_FIELDS = {
    "free-class": ["name", "email"],
    "assessment": ["name", "email", "phone"],
    "contact": ["name", "email", "message"],
    "appointment": ["first_name", "last_name", "email", "phone", "sel_time"],
}

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[\d\s\-()+]+$")
PHONE_MIN_DIGITS = 10
# ISO-8601 with an explicit offset, e.g. 2024-05-01T10:00:00-07:00
SEL_TIME_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}[+-]\d{2}:\d{2}$")


def required_fields(form_type: str) -> list[str]:
    """Required fields for a form type."""
    return FORM_REQUIRED_FIELDS.get(form_type, DEFAULT_REQUIRED_FIELDS)


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def validate_payload(form_type: str, payload: dict) -> dict[str, str]:
    """Check a payload for missing or malformed fields.

    Args:
        form_type: Form tag (free-class, assessment, contact, appointment, ...)
        payload: Field name -> value

    Returns:
        Mapping of field name to error message. Empty when the payload is valid.
    """
    errors = {}

    for field in required_fields(form_type):
        if _is_blank(payload.get(field)):
            errors[field] = f"{field.replace('_', ' ').capitalize()} is required"

    email = payload.get("email")
    if "email" not in errors and isinstance(email, str) and email.strip():
        if not EMAIL_PATTERN.match(email.strip()):
            errors["email"] = "Please provide a valid email address"

    phone = payload.get("phone")
    if "phone" not in errors and isinstance(phone, str) and phone.strip():
        digits = re.sub(r"\D", "", phone)
        if not PHONE_PATTERN.match(phone) or len(digits) < PHONE_MIN_DIGITS:
            errors["phone"] = "Please provide a valid phone number"

    sel_time = payload.get("sel_time")
    if "sel_time" not in errors and isinstance(sel_time, str) and sel_time.strip():
        if not SEL_TIME_PATTERN.match(sel_time):
            errors["sel_time"] = "Please provide a valid appointment time"

    return errors
