"""Correlation context for log records.

A ``LogContext`` rides along in a ContextVar so every record emitted while an
operation runs (a login, a roster refresh, a marks update) carries the same
correlation ID and identifying fields.
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from typing import Any


def _new_correlation_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass
class LogContext:
    """Contextual fields attached to log records."""

    correlation_id: str = field(default_factory=_new_correlation_id)
    operation: str | None = None
    admin: str | None = None
    student_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"correlation_id": self.correlation_id}
        for key in ("operation", "admin", "student_id"):
            value = getattr(self, key)
            if value:
                data[key] = value
        data.update(self.extra)
        return data


_current: ContextVar[LogContext | None] = ContextVar("rosterdesk_log_context", default=None)


def get_context() -> LogContext:
    """Return the active context.

    Outside any ``with_context`` block each call gets a fresh, unscoped
    context, so unrelated records never share a correlation ID.
    """
    ctx = _current.get()
    return ctx if ctx is not None else LogContext()


def clear_context() -> None:
    _current.set(None)


def get_correlation_id() -> str:
    return get_context().correlation_id


class with_context:
    """Scope a fresh ``LogContext`` to a ``with`` block.

    Usage:
        with with_context(operation="patch_marks", student_id=student.id):
            logger.info("Updating marks")
    """

    def __init__(
        self,
        operation: str | None = None,
        admin: str | None = None,
        student_id: str | None = None,
        correlation_id: str | None = None,
        **extra: Any,
    ) -> None:
        self.context = LogContext(
            correlation_id=correlation_id or _new_correlation_id(),
            operation=operation,
            admin=admin,
            student_id=student_id,
            extra=extra,
        )
        self._token: Token | None = None

    def __enter__(self) -> LogContext:
        self._token = _current.set(self.context)
        return self.context

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._token is not None:
            _current.reset(self._token)
            self._token = None
