from email_validator import SPECIAL_USE_DOMAIN_NAMES, validate_email
from pydantic import BaseModel, ValidationError, field_validator
from typing import Any, Dict, Optional, Tuple

FIELD_LABELS = {
    "fullName": "Full Name",
    "email": "Email",
    "year": "Year",
    "semester": "Semester",
}

INITIAL_VALUES = {"fullName": "", "email": "", "year": 0, "semester": 0}


def check_email_shape(value: str):
    """Raise ValueError unless ``value`` looks like an email address.

    Reserved names such as ``campus.local`` are accepted: their domain is
    checked as if it ended in ``.example`` instead.
    """
    local, at, domain = value.rpartition("@")
    lowered = domain.lower()
    for name in SPECIAL_USE_DOMAIN_NAMES:
        if lowered == name or lowered.endswith("." + name):
            domain = lowered[: -len(name)] + "example"
            break
    validate_email(f"{local}{at}{domain}", check_deliverability=False, globally_deliverable=False)


class StudentForm(BaseModel):
    fullName: str
    email: str
    year: int
    semester: int

    @field_validator("fullName", "email", "year", "semester", mode="before")
    @classmethod
    def required(cls, value, info):
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError(f"{FIELD_LABELS[info.field_name]} is required")
        return value

    @field_validator("email")
    @classmethod
    def email_shape(cls, value):
        # The address is sent exactly as typed; it is the record key.
        check_email_shape(value)
        return value


def _message(field: str, error: Dict[str, Any]) -> str:
    label = FIELD_LABELS[field]
    if error["type"] == "missing":
        return f"{label} is required"
    if error["type"] == "value_error" and str(error.get("msg", "")).endswith("is required"):
        return f"{label} is required"
    if field == "email":
        return "Invalid email format"
    if field in ("year", "semester"):
        return f"{label} must be a number"
    return error["msg"]


def validate_student_form(values: Dict[str, Any]) -> Tuple[Optional[StudentForm], Dict[str, str]]:
    """Check form values before anything is sent.

    Returns the parsed form and no errors, or None and a message per field.
    Only the first problem of each field is reported.
    """
    try:
        return StudentForm.model_validate(values), {}
    except ValidationError as e:
        errors = {}
        for error in e.errors():
            field = error["loc"][0] if error["loc"] else None
            if field in FIELD_LABELS and field not in errors:
                errors[field] = _message(field, error)
        return None, errors
