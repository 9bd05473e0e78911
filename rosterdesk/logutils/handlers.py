"""Log handlers for the console and for log files."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.text import Text


class RichConsoleHandler(logging.Handler):
    """Write records to a rich Console with a coloured level tag."""

    LEVEL_STYLES = {
        "DEBUG": "dim",
        "INFO": "blue",
        "WARNING": "yellow",
        "ERROR": "red bold",
        "CRITICAL": "red bold reverse",
    }

    def __init__(self, console: Console | None = None) -> None:
        super().__init__()
        self.console = console or Console(stderr=True)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = Text(f"[{record.levelname:8}] ", style=self.LEVEL_STYLES.get(record.levelname, ""))
            # Text() rather than markup: messages may contain square brackets
            line.append(Text(self.format(record)))
            self.console.print(line)
        except Exception:
            self.handleError(record)


class SafeRotatingFileHandler(RotatingFileHandler):
    """RotatingFileHandler that creates the log directory and writes UTF-8."""

    def __init__(self, filename: str | Path, max_bytes: int, backup_count: int) -> None:
        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(
            filename=str(path),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
