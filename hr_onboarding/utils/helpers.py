"""Request-parsing helpers shared by the onboarding blueprint.

parse_date:     ISO / DD.MM.YYYY → date, None on bad input
parse_score:    0–100 numeric score, None on bad input
require_fields: names of missing or blank body fields
check_patch:    per-field type errors of a PATCH body
"""
from datetime import date, datetime

from hr_onboarding.models.onboarding import ConsultantType


def parse_date(value):
    """Parse a date string (ISO or DD.MM.YYYY) to a date object.

    Returns None for empty/invalid input. Supports:
    - YYYY-MM-DD (ISO format)
    - YYYY-MM-DDTHH:MM:SS (datetime ISO → .date())
    - DD.MM.YYYY
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except (ValueError, TypeError):
        pass
    try:
        return datetime.fromisoformat(str(value)).date()
    except (ValueError, TypeError):
        pass
    try:
        return datetime.strptime(str(value), "%d.%m.%Y").date()
    except (ValueError, TypeError):
        return None


def parse_score(value):
    """Return ``value`` as a number in [0, 100], or None.

    Booleans are rejected even though they are ints.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not 0 <= value <= 100:
        return None
    return value


def require_fields(data, *fields):
    """Return the subset of ``fields`` that are absent or blank in ``data``."""
    missing = []
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing


_NAME_FIELDS = ("title", "name")
_TEXT_FIELDS = ("description", "category", "priority", "status")
_INT_FIELDS = {
    # field: (min, max)
    "order": (0, None),
    "duration": (0, None),
    "passing_score": (0, 100),
    "max_attempts": (1, None),
}


def _int_error(value, low, high):
    if isinstance(value, bool) or not isinstance(value, int):
        return "must be an integer"
    if value < low or (high is not None and value > high):
        return f"must be between {low} and {high}" if high is not None else f"must be at least {low}"
    return None


def check_patch(data):
    """Return {field: reason} for patch values of the wrong type.

    Only known entity fields are checked; unknown fields are left to the
    services, which reject them as not patchable.
    """
    errors = {}
    for field in _NAME_FIELDS:
        if field in data:
            value = data[field]
            if not isinstance(value, str) or not value.strip():
                errors[field] = "must be a non-blank string"
    for field in _TEXT_FIELDS:
        if field in data and not isinstance(data[field], str):
            errors[field] = "must be a string"
    for field, (low, high) in _INT_FIELDS.items():
        if field in data:
            reason = _int_error(data[field], low, high)
            if reason:
                errors[field] = reason
    if "is_required" in data and not isinstance(data["is_required"], bool):
        errors["is_required"] = "must be a boolean"
    if "applicable_for" in data:
        value = data["applicable_for"]
        allowed = {t.value for t in ConsultantType}
        if not isinstance(value, list) or not all(isinstance(v, str) and v in allowed for v in value):
            errors["applicable_for"] = f"must be a list drawn from {sorted(allowed)}"
    return errors
