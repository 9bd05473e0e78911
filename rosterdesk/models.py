"""Pydantic models and form drafts for the roster console."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

MIN_MARKS = 0.0
MAX_MARKS = 100.0


class DraftValidationError(ValueError):
    """Raised when a form draft fails the form's field constraints."""


class Student(BaseModel):
    """A student record as returned by the roster API."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    email: str
    course: Optional[str] = None
    marks: Optional[float] = None


class Session(BaseModel):
    """An authenticated admin: bearer token plus identity."""

    token: str
    admin_email: Optional[str] = None
    admin_name: Optional[str] = None

    @classmethod
    def from_login_response(cls, data: dict[str, Any]) -> Session:
        """Build a session from the ``{token, email, name}`` login payload."""
        return cls(token=data["token"], admin_email=data.get("email"), admin_name=data.get("name"))


def parse_marks(text: str, required: bool = False) -> Optional[float]:
    """Convert marks text from a form field into a number.

    Args:
        text: Raw field value
        required: Reject empty input instead of returning None

    Returns:
        The marks as a float, or None when the field is empty

    Raises:
        DraftValidationError: If the text is not a number in [0, 100]
    """
    text = (text or "").strip()
    if not text:
        if required:
            raise DraftValidationError("Marks are required")
        return None

    try:
        value = float(text)
    except ValueError:
        raise DraftValidationError(f"Marks must be a number, got {text!r}") from None

    if not math.isfinite(value) or not MIN_MARKS <= value <= MAX_MARKS:
        raise DraftValidationError("Marks must be between 0 and 100")
    return value


def format_marks_input(marks: Optional[float]) -> str:
    """Render stored marks back into form text ("" when absent)."""
    if marks is None:
        return ""
    return str(int(marks)) if float(marks).is_integer() else str(marks)


def format_marks(marks: Optional[float]) -> str:
    """Display form of a student's marks: ``87.5%``, ``90%`` or ``N/A``."""
    if marks is None:
        return "N/A"
    return f"{format_marks_input(marks)}%"


@dataclass
class StudentDraft:
    """Unsaved copy of a student's editable fields, all held as text."""

    name: str = ""
    email: str = ""
    course: str = ""
    marks: str = ""

    @classmethod
    def from_student(cls, student: Student) -> StudentDraft:
        return cls(
            name=student.name,
            email=student.email,
            course=student.course or "",
            marks=format_marks_input(student.marks),
        )

    def to_payload(self) -> dict[str, Any]:
        """Validate the draft and build the request body for create/update.

        Raises:
            DraftValidationError: If a required field is empty, the email is
                malformed, or marks are not a number in [0, 100]
        """
        name = self.name.strip()
        email = self.email.strip()
        course = self.course.strip()

        if not name:
            raise DraftValidationError("Name is required")
        if not email:
            raise DraftValidationError("Email is required")
        if "@" not in email or email.startswith("@") or email.endswith("@"):
            raise DraftValidationError(f"Invalid email address: {email}")
        if not course:
            raise DraftValidationError("Course is required")

        return {
            "name": name,
            "email": email,
            "course": course,
            "marks": parse_marks(self.marks),
        }
