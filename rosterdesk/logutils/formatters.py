"""Log formatters: JSON lines for machines, one-liners for people."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from .context import get_context
from .masking import mask_dict, mask_sensitive_string


class JSONFormatter(logging.Formatter):
    """Render each record as a single JSON object.

    Structured data passed as ``extra={"extra_data": {...}}`` is emitted under
    the ``extra`` key, masked like the message itself.
    """

    def __init__(self, mask_sensitive: bool = True, include_context: bool = True) -> None:
        super().__init__()
        self.mask_sensitive = mask_sensitive
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if self.mask_sensitive:
            message = mask_sensitive_string(message)

        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
            "source": {"function": record.funcName, "line": record.lineno},
        }

        if self.include_context:
            context = get_context().to_dict()
            payload["context"] = mask_dict(context) if self.mask_sensitive else context

        extra = getattr(record, "extra_data", None)
        if extra:
            if self.mask_sensitive and isinstance(extra, dict):
                extra = mask_dict(extra)
            payload["extra"] = extra

        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(payload, default=str)


class StandardFormatter(logging.Formatter):
    """Plain text: ``TIMESTAMP - LEVEL - LOGGER - [CORRELATION_ID] - MESSAGE``."""

    DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - [%(correlation_id)s] - %(message)s"
    DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

    def __init__(self, mask_sensitive: bool = True) -> None:
        super().__init__(fmt=self.DEFAULT_FORMAT, datefmt=self.DEFAULT_DATE_FORMAT)
        self.mask_sensitive = mask_sensitive

    def format(self, record: logging.LogRecord) -> str:
        record.correlation_id = get_context().correlation_id
        text = super().format(record)
        return mask_sensitive_string(text) if self.mask_sensitive else text


class CompactFormatter(logging.Formatter):
    """Message only, for the rich console handler which adds its own level tag."""

    def __init__(self, mask_sensitive: bool = True) -> None:
        super().__init__()
        self.mask_sensitive = mask_sensitive

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        return mask_sensitive_string(message) if self.mask_sensitive else message
