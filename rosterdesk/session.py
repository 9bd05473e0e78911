"""Persistent storage of the admin session.

The session lives under three fixed keys in a key-value backend. The backend
is injected, so the console, the CLI and the tests can each pick one.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional, Protocol

from .logutils import get_logger
from .models import Session

logger = get_logger(__name__)

TOKEN_KEY = "token"
EMAIL_KEY = "adminEmail"
NAME_KEY = "adminName"
SESSION_KEYS = (TOKEN_KEY, EMAIL_KEY, NAME_KEY)


class KeyValueStorage(Protocol):
    """Minimal string key-value interface a session backend must provide."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStorage:
    """In-process storage; forgotten when the process exits."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStorage:
    """Storage backed by a JSON object in a file.

    The file is re-read on every access so that a session written or cleared
    by another process (the CLI, another browser tab) is seen immediately.
    Writes go through a temporary file and are restricted to the owner.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def _load(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable session file", extra={"extra_data": {"path": str(self.path)}})
            return {}

        if not isinstance(data, dict):
            return {}
        return {str(key): str(value) for key, value in data.items() if value is not None}

    def _dump(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, self.path)

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)


class SessionStore:
    """Read and write the admin session through a storage backend."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage

    def save(self, session: Session) -> None:
        """Persist a session, overwriting any previous one."""
        self.storage.set(TOKEN_KEY, session.token)
        self.storage.set(EMAIL_KEY, session.admin_email or "")
        self.storage.set(NAME_KEY, session.admin_name or "")
        logger.info("Session saved", extra={"extra_data": {"admin": session.admin_email}})

    def read(self) -> Optional[Session]:
        """Return the stored session, or None when no token is stored."""
        token = self.storage.get(TOKEN_KEY)
        if not token:
            return None
        return Session(
            token=token,
            admin_email=self.storage.get(EMAIL_KEY) or None,
            admin_name=self.storage.get(NAME_KEY) or None,
        )

    def token(self) -> Optional[str]:
        return self.storage.get(TOKEN_KEY) or None

    def clear(self) -> None:
        """Remove every session key."""
        for key in SESSION_KEYS:
            self.storage.remove(key)
        logger.info("Session cleared")
