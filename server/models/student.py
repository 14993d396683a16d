from pydantic import BaseModel, ConfigDict, ValidationError
from typing import Any, Dict, Optional

from errors import StoreFailure


class StudentDocument(BaseModel):
    """Shape of a stored student.

    This mirrors the collection schema rather than validating input: unknown
    fields are dropped, numbers are accepted for text fields and numeric
    strings for year/semester. Nothing is checked beyond what can be cast.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    fullName: Optional[str] = None
    email: Optional[str] = None
    year: Optional[int] = None
    semester: Optional[int] = None


class StudentCreate(StudentDocument):
    email: str


class StudentUpdate(StudentDocument):
    pass


def _describe(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"]) or "body"
        if error["type"] == "missing":
            problems.append(f"{path}: Path `{path}` is required.")
        else:
            problems.append(f"{path}: Cast failed for value {error.get('input')!r} at path `{path}`")
    return "Student validation failed: " + ", ".join(problems)


def cast_new_student(payload: Any) -> Dict[str, Any]:
    """Cast a create body to the stored document shape."""
    try:
        student = StudentCreate.model_validate(payload)
    except ValidationError as e:
        raise StoreFailure(_describe(e))
    return student.model_dump(exclude_unset=True)


def cast_student_changes(payload: Any) -> Dict[str, Any]:
    """Cast an update body; only fields present in the body are kept."""
    try:
        changes = StudentUpdate.model_validate(payload)
    except ValidationError as e:
        raise StoreFailure(_describe(e))
    return changes.model_dump(exclude_unset=True)


def serialize_student(document: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if document is None:
        return None
    document = dict(document)
    if "_id" in document:
        document["_id"] = str(document["_id"])
    return document
