from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from console.client import ServiceError
from console.forms import INITIAL_VALUES, validate_student_form


class ModalPhase(str, Enum):
    CLOSED = "closed"
    CREATE = "create"
    EDIT = "edit"
    SUBMITTING = "submitting"


@dataclass
class Notification:
    level: str  # "success" or "error"
    message: str
    description: Optional[str] = None


@dataclass
class Modal:
    phase: ModalPhase = ModalPhase.CLOSED
    editing: Optional[Dict[str, Any]] = None
    values: Dict[str, Any] = field(default_factory=lambda: dict(INITIAL_VALUES))
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_open(self) -> bool:
        return self.phase is not ModalPhase.CLOSED

    @property
    def title(self) -> str:
        return "Edit Student" if self.editing else "Add Student"


class StudentConsole:
    """What one admin sees: the student list, the form modal and pending notices.

    The list is never patched locally. It is replaced from the service on
    mount and after every successful create, update or delete.
    """

    def __init__(self, client):
        self.client = client
        self.students: List[Dict[str, Any]] = []
        self.modal = Modal()
        self.notifications: List[Notification] = []

    def notify(self, level: str, message: str, description: str = None):
        self.notifications.append(Notification(level, message, description))

    def pop_notifications(self) -> List[Notification]:
        pending, self.notifications = self.notifications, []
        return pending

    def fetch_students(self):
        try:
            self.students = self.client.list_students()
        except ServiceError as e:
            self.notify("error", "Error fetching students", e.message)

    def find(self, email: str) -> Optional[Dict[str, Any]]:
        for student in self.students:
            if student.get("email") == email:
                return student
        return None

    def open_create(self):
        self.modal = Modal(phase=ModalPhase.CREATE)

    def open_edit(self, student: Dict[str, Any]):
        values = dict(INITIAL_VALUES)
        values.update({k: student.get(k) for k in INITIAL_VALUES if k in student})
        self.modal = Modal(phase=ModalPhase.EDIT, editing=student, values=values)

    def cancel(self):
        self.modal = Modal()

    def submit(self, values: Dict[str, Any]) -> bool:
        """Validate and send the modal form. Returns True once the modal closed."""
        if self.modal.phase not in (ModalPhase.CREATE, ModalPhase.EDIT):
            return False

        opened_as = self.modal.phase
        values = dict(values)
        if self.modal.editing:
            # The email field is locked while editing.
            values["email"] = self.modal.editing["email"]
        self.modal.values = values

        form, errors = validate_student_form(values)
        self.modal.errors = errors
        if form is None:
            return False

        payload = form.model_dump()
        self.modal.phase = ModalPhase.SUBMITTING
        try:
            if self.modal.editing:
                self.client.update_student(self.modal.editing["email"], payload)
                message = "Student updated successfully!"
            else:
                self.client.create_student(payload)
                message = "Student added successfully!"
        except ServiceError as e:
            self.modal.phase = opened_as
            self.notify("error", "Error saving student", e.message)
            return False

        self.notify("success", message)
        self.modal = Modal()
        self.fetch_students()
        return True

    def delete(self, email: str) -> bool:
        try:
            self.client.delete_student(email)
        except ServiceError as e:
            self.notify("error", "Error deleting student", e.message)
            return False
        self.notify("success", "Student deleted successfully!")
        self.fetch_students()
        return True
