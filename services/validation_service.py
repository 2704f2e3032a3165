import re
from typing import Mapping

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
CONTACT_DIGITS = 10


class ValidationError(ValueError):
    """Caller-supplied data is missing required fields or is malformed.

    errors maps a field name to a human readable message.
    """

    def __init__(self, errors: Mapping[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.errors.items()))


def _blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _digits(value: str) -> str:
    return re.sub(r"\D", "", value or "")


# -----------------------------
# Required fields (enforced by the record store)
# -----------------------------
PATIENT_REQUIRED = {
    "name": "Name is required",
    "dob": "Date of birth is required",
    "contact": "Contact number is required",
    "email": "Email is required",
    "address": "Address is required",
    "emergency_contact": "Emergency contact is required",
}

INCIDENT_REQUIRED = {
    "patient_id": "Please select a patient",
    "title": "Title is required",
    "description": "Description is required",
    "appointment_date": "Appointment date is required",
}


def _required_errors(required: Mapping[str, str], data: Mapping, partial: bool) -> dict[str, str]:
    """With partial=True only the fields present in data are checked (patches)."""
    return {
        f: msg
        for f, msg in required.items()
        if (f in data or not partial) and _blank(data.get(f))
    }


def required_patient_errors(data: Mapping, partial: bool = False) -> dict[str, str]:
    return _required_errors(PATIENT_REQUIRED, data, partial)


def required_incident_errors(data: Mapping, partial: bool = False) -> dict[str, str]:
    return _required_errors(INCIDENT_REQUIRED, data, partial)


# -----------------------------
# Form checks (presentation layer)
# -----------------------------
def validate_patient_form(data: Mapping) -> dict[str, str]:
    errors = required_patient_errors(data)

    if "contact" not in errors and len(_digits(data.get("contact"))) != CONTACT_DIGITS:
        errors["contact"] = "Please enter a valid 10-digit contact number"

    if "email" not in errors and not EMAIL_PATTERN.search(data.get("email") or ""):
        errors["email"] = "Please enter a valid email address"

    return errors


def parse_cost(value) -> float | None:
    """Blank means no cost. Raises ValueError for anything non-numeric."""
    if _blank(value):
        return None
    return float(value)


def validate_incident_form(data: Mapping) -> dict[str, str]:
    errors = required_incident_errors(data)

    try:
        parse_cost(data.get("cost"))
    except (TypeError, ValueError):
        errors["cost"] = "Cost must be a number"

    return errors


def validate_login_form(email: str, password: str) -> dict[str, str]:
    if _blank(email) or _blank(password):
        return {"form": "Please fill in all fields"}
    return {}
