"""RosterDesk: admin console for a student roster served over HTTP."""

from .client import ApiError, RosterApiClient
from .config import ConsoleConfig
from .models import DraftValidationError, Session, Student, StudentDraft
from .session import JsonFileStorage, MemoryStorage, SessionStore

__version__ = "0.1.0"

__all__ = [
    "ApiError",
    "RosterApiClient",
    "ConsoleConfig",
    "DraftValidationError",
    "Session",
    "Student",
    "StudentDraft",
    "JsonFileStorage",
    "MemoryStorage",
    "SessionStore",
]
