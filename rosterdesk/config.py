"""Configuration for the roster console and CLI."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_API_URL = "http://localhost:8080"
DEFAULT_SESSION_FILE = "~/.rosterdesk/session.json"


@dataclass
class ConsoleConfig:
    """Settings shared by the Streamlit console and the CLI."""

    api_url: str = DEFAULT_API_URL
    session_file: Path = Path(DEFAULT_SESSION_FILE).expanduser()
    verify_token: bool = False
    http_timeout: Optional[float] = None  # None keeps httpx's default

    @classmethod
    def from_env(cls) -> "ConsoleConfig":
        """Create configuration from environment variables."""
        api_url = os.environ.get("ROSTER_API_URL", DEFAULT_API_URL).strip()
        if not api_url.startswith(("http://", "https://")):
            raise ValueError(f"ROSTER_API_URL must be an http(s) URL, got {api_url!r}")

        timeout = None
        raw_timeout = os.environ.get("ROSTER_HTTP_TIMEOUT", "").strip()
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ValueError(
                    f"ROSTER_HTTP_TIMEOUT must be a number of seconds, got {raw_timeout!r}"
                ) from None
            if timeout <= 0:
                raise ValueError("ROSTER_HTTP_TIMEOUT must be positive")

        return cls(
            api_url=api_url.rstrip("/"),
            session_file=Path(os.environ.get("ROSTER_SESSION_FILE", DEFAULT_SESSION_FILE)).expanduser(),
            verify_token=os.environ.get("ROSTER_VERIFY_TOKEN", "false").lower() in ("true", "1", "yes"),
            http_timeout=timeout,
        )
