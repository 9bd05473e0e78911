"""Pytest fixtures for the Streamlit console tests.

Provides:
- An in-memory stand-in for RosterApiClient with call recording and
  failure injection
- Session stores over in-memory storage
- Controllers wired to both
"""

from typing import Callable, Optional

import pytest

from rosterdesk import ApiError, MemoryStorage, Session, SessionStore, Student, StudentDraft
from rosterdesk.logutils import reset_config

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin123"


# =============================================================================
# Fake API client
# =============================================================================


class FakeRosterClient:
    """Drop-in for RosterApiClient that keeps the roster in a list.

    ``fail`` maps an operation name to the ApiError it should raise.
    ``before_list`` runs inside ``list_students`` before the roster is
    returned, which lets a test start a second refresh while the first is
    still in flight.
    """

    def __init__(self, session_store: SessionStore) -> None:
        self.session_store = session_store
        self.students: list[Student] = []
        self.calls: list[tuple] = []
        self.fail: dict[str, ApiError] = {}
        self.before_list: Optional[Callable[[], None]] = None
        self.token_valid = True
        self._next_id = 1

    def add(self, name: str, email: str, course: str = "Maths", marks: Optional[float] = None) -> Student:
        student = Student(id=f"s{self._next_id}", name=name, email=email, course=course, marks=marks)
        self._next_id += 1
        self.students.append(student)
        return student

    def _record(self, operation: str, *args) -> None:
        self.calls.append((operation, *args))
        if operation in self.fail:
            raise self.fail[operation]

    def calls_to(self, operation: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == operation]

    def login(self, email: str, password: str) -> Session:
        self._record("login", email, password)
        if email != ADMIN_EMAIL or password != ADMIN_PASSWORD:
            raise ApiError("Invalid email or password", status_code=401)
        return Session(token="token-1", admin_email=email, admin_name="Ada Admin")

    def verify_token(self) -> Session:
        self._record("verify_token")
        if not self.token_valid:
            raise ApiError("Invalid token", status_code=401)
        return self.session_store.read()

    def list_students(self) -> list[Student]:
        self._record("list_students")
        snapshot = list(self.students)
        if self.before_list is not None:
            hook, self.before_list = self.before_list, None
            hook()
        return snapshot

    def create_student(self, draft: StudentDraft) -> Student:
        payload = draft.to_payload()
        self._record("create_student", payload)
        return self.add(payload["name"], payload["email"], payload["course"], payload["marks"])

    def update_student(self, student_id: str, draft: StudentDraft) -> Student:
        payload = draft.to_payload()
        self._record("update_student", student_id, payload)
        for index, student in enumerate(self.students):
            if student.id == student_id:
                self.students[index] = Student(id=student_id, **payload)
                return self.students[index]
        raise ApiError("Failed to update student", status_code=404)

    def patch_marks(self, student_id: str, marks: float) -> Student:
        self._record("patch_marks", student_id, marks)
        for index, student in enumerate(self.students):
            if student.id == student_id:
                self.students[index] = student.model_copy(update={"marks": marks})
                return self.students[index]
        raise ApiError("Failed to update marks", status_code=404)

    def delete_student(self, email: str) -> None:
        self._record("delete_student", email)
        self.students = [s for s in self.students if s.email != email]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_log_config():
    """Reload logging configuration from the environment for each test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def session_store() -> SessionStore:
    return SessionStore(MemoryStorage())


@pytest.fixture
def fake_client(session_store: SessionStore) -> FakeRosterClient:
    return FakeRosterClient(session_store)


@pytest.fixture
def logged_in_store(session_store: SessionStore) -> SessionStore:
    """Session store already holding an admin session."""
    session_store.save(Session(token="token-1", admin_email=ADMIN_EMAIL, admin_name="Ada Admin"))
    return session_store


@pytest.fixture
def seeded_client(fake_client: FakeRosterClient) -> FakeRosterClient:
    """Fake client with three students on the roster."""
    fake_client.add("Grace Hopper", "grace@example.com", "Computer Science", 87.5)
    fake_client.add("Alan Turing", "alan@example.com", "Maths", 90.0)
    fake_client.add("Ada Lovelace", "ada@example.com", "Maths")
    return fake_client


@pytest.fixture
def client_factory() -> Callable[[SessionStore], FakeRosterClient]:
    """Builds a fresh fake client per session store, as each browser would get."""
    return FakeRosterClient
