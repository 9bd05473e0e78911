"""HTTP client for the roster API.

Every operation either returns the decoded response body or raises
``ApiError`` with a message fit for showing to the admin. Transport failures
and non-2xx statuses are both reported through ``ApiError``; only the auth
endpoints pass the server's own error text through.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, TypeVar
from urllib.parse import quote

import httpx

from .config import ConsoleConfig
from .logutils import get_logger, with_context
from .models import Session, Student, StudentDraft
from .session import SessionStore

logger = get_logger(__name__)

T = TypeVar("T")

AUTH_PATH = "/api/auth"
STUDENTS_PATH = "/students"


class ApiError(Exception):
    """Raised when a roster API call fails.

    Attributes:
        message: Human-readable description of the failure
        status_code: HTTP status, or None when the request never got a response
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _segment(value: str) -> str:
    """Percent-encode a value for use as a single path segment."""
    return quote(value, safe="@")


class RosterApiClient:
    """Client for ``/api/auth`` and ``/students``.

    The session store is consulted on every request; when it holds a token the
    request carries it as a bearer credential.
    """

    def __init__(
        self,
        base_url: str,
        session_store: SessionStore,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        client_args: dict[str, Any] = {"base_url": base_url.rstrip("/")}
        if timeout is not None:
            client_args["timeout"] = timeout
        if transport is not None:
            client_args["transport"] = transport

        self.session_store = session_store
        self._http = httpx.Client(**client_args)

    @classmethod
    def from_config(cls, config: ConsoleConfig, session_store: SessionStore) -> RosterApiClient:
        return cls(config.api_url, session_store, timeout=config.http_timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> RosterApiClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _auth_headers(self) -> dict[str, str]:
        token = self.session_store.token()
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _request(
        self,
        method: str,
        path: str,
        failure_message: str,
        json: Any = None,
        use_server_message: bool = False,
    ) -> httpx.Response:
        try:
            response = self._http.request(method, path, json=json, headers=self._auth_headers())
        except httpx.HTTPError as exc:
            logger.warning(
                f"{method} {path} failed before a response arrived: {exc}",
                extra={"extra_data": {"error_type": type(exc).__name__}},
            )
            raise ApiError(failure_message) from exc

        if not response.is_success:
            message = failure_message
            if use_server_message:
                message = response.text.strip() or failure_message
            logger.warning(
                f"{method} {path} returned {response.status_code}",
                extra={"extra_data": {"status_code": response.status_code}},
            )
            raise ApiError(message, status_code=response.status_code)

        logger.debug(f"{method} {path} -> {response.status_code}")
        return response

    @staticmethod
    def _decode(response: httpx.Response, failure_message: str, parse: Callable[[Any], T]) -> T:
        try:
            return parse(response.json())
        except (ValueError, KeyError, TypeError) as exc:
            # pydantic's ValidationError and JSONDecodeError are both ValueErrors
            logger.warning(f"Unexpected response body: {exc}")
            raise ApiError(failure_message, status_code=response.status_code) from exc

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def login(self, email: str, password: str) -> Session:
        """Exchange credentials for a session.

        Raises:
            ApiError: With the server's message (e.g. "Invalid email or
                password") or "Login failed"
        """
        with with_context(operation="login", admin=email):
            response = self._request(
                "POST",
                f"{AUTH_PATH}/login",
                "Login failed",
                json={"email": email, "password": password},
                use_server_message=True,
            )
            session = self._decode(response, "Login failed", Session.from_login_response)
            logger.info("Login accepted", extra={"extra_data": {"admin": session.admin_email}})
            return session

    def register_admin(self, name: str, email: str, password: str) -> str:
        """Create an admin account; returns the server's confirmation text."""
        with with_context(operation="register_admin", admin=email):
            response = self._request(
                "POST",
                f"{AUTH_PATH}/register",
                "Registration failed",
                json={"name": name, "email": email, "password": password},
                use_server_message=True,
            )
            return response.text.strip()

    def verify_token(self) -> Session:
        """Ask the server whether the stored token is still valid.

        Returns:
            The session as the server sees it

        Raises:
            ApiError: "Invalid token" when no token is stored, or the server
                rejects it
        """
        with with_context(operation="verify_token"):
            if not self.session_store.token():
                raise ApiError("Invalid token")
            response = self._request("GET", f"{AUTH_PATH}/verify", "Invalid token")
            return self._decode(response, "Invalid token", Session.from_login_response)

    # ------------------------------------------------------------------
    # Students
    # ------------------------------------------------------------------

    def list_students(self) -> list[Student]:
        """Fetch every student, in server order."""
        with with_context(operation="list_students"):
            response = self._request("GET", STUDENTS_PATH, "Failed to fetch students")
            students = self._decode(
                response,
                "Failed to fetch students",
                lambda body: [Student.model_validate(item) for item in body],
            )
            logger.info(f"Fetched {len(students)} students")
            return students

    def get_student(self, student_id: str) -> Student:
        with with_context(operation="get_student", student_id=student_id):
            response = self._request(
                "GET", f"{STUDENTS_PATH}/{_segment(student_id)}", "Failed to fetch student"
            )
            return self._decode(response, "Failed to fetch student", Student.model_validate)

    def create_student(self, draft: StudentDraft) -> Student:
        """Create a student from a form draft.

        Raises:
            DraftValidationError: If the draft is incomplete; no request is sent
            ApiError: "Failed to add student"
        """
        payload = draft.to_payload()
        with with_context(operation="create_student"):
            response = self._request("POST", STUDENTS_PATH, "Failed to add student", json=payload)
            student = self._decode(response, "Failed to add student", Student.model_validate)
            logger.info("Student added", extra={"extra_data": {"student_id": student.id}})
            return student

    def update_student(self, student_id: str, draft: StudentDraft) -> Student:
        """Replace a student's fields with those of a form draft."""
        payload = draft.to_payload()
        with with_context(operation="update_student", student_id=student_id):
            response = self._request(
                "PUT",
                f"{STUDENTS_PATH}/{_segment(student_id)}",
                "Failed to update student",
                json=payload,
            )
            student = self._decode(response, "Failed to update student", Student.model_validate)
            logger.info("Student updated")
            return student

    def patch_marks(self, student_id: str, marks: float) -> Student:
        """Update only a student's marks."""
        with with_context(operation="patch_marks", student_id=student_id):
            response = self._request(
                "PATCH",
                f"{STUDENTS_PATH}/{_segment(student_id)}/marks",
                "Failed to update marks",
                json={"marks": float(marks)},
            )
            student = self._decode(response, "Failed to update marks", Student.model_validate)
            logger.info("Marks updated", extra={"extra_data": {"marks": student.marks}})
            return student

    def delete_student(self, email: str) -> None:
        """Delete a student; the API addresses deletions by email."""
        with with_context(operation="delete_student"):
            self._request(
                "DELETE", f"{STUDENTS_PATH}/email/{_segment(email)}", "Failed to delete student"
            )
            logger.info(f"Student deleted: {email}")
