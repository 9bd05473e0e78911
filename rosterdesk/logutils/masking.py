"""Redaction of credentials and personal data in log output."""

from __future__ import annotations

import re
from typing import Any

MASK = "***MASKED***"

# Each pattern keeps group 1 (the key) and replaces the value that follows it.
_KEYED_VALUE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r'(["\']?password["\']?\s*[:=]\s*)["\']?[^"\'\s,}\]]+["\']?', re.IGNORECASE),
    re.compile(
        r'(["\']?(?:auth[_-]?|access[_-]?)?token["\']?\s*[:=]\s*)["\']?[\w\-.]+["\']?',
        re.IGNORECASE,
    ),
    re.compile(r"(authorization\s*[:=]\s*bearer\s+)[\w\-.]+", re.IGNORECASE),
    re.compile(r"(\bbearer\s+)[\w\-.]+", re.IGNORECASE),
)

_EMAIL = re.compile(r"\b([a-zA-Z0-9._%+-]{1,2})[a-zA-Z0-9._%+-]*@([a-zA-Z0-9.-]+\.[a-zA-Z]{2,})\b")

SENSITIVE_KEYWORDS: frozenset[str] = frozenset(
    {"password", "passwd", "secret", "token", "authorization", "bearer", "credential"}
)


def mask_sensitive_string(text: str) -> str:
    """Redact passwords, bearer tokens and the local part of email addresses."""
    if not text:
        return text

    for pattern in _KEYED_VALUE_PATTERNS:
        text = pattern.sub(r"\g<1>" + MASK, text)

    # admin@example.com -> ad***@example.com
    return _EMAIL.sub(r"\1***@\2", text)


def is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return any(keyword in lowered for keyword in SENSITIVE_KEYWORDS)


def mask_dict(data: dict[str, Any], depth: int = 0, max_depth: int = 8) -> dict[str, Any]:
    """Return a copy of ``data`` with sensitive keys and string values redacted."""
    if depth >= max_depth:
        return data

    masked: dict[str, Any] = {}
    for key, value in data.items():
        if is_sensitive_key(str(key)):
            masked[key] = MASK
        elif isinstance(value, dict):
            masked[key] = mask_dict(value, depth + 1, max_depth)
        elif isinstance(value, list):
            masked[key] = [_mask_item(item, depth + 1, max_depth) for item in value]
        elif isinstance(value, str):
            masked[key] = mask_sensitive_string(value)
        else:
            masked[key] = value
    return masked


def _mask_item(item: Any, depth: int, max_depth: int) -> Any:
    if isinstance(item, dict):
        return mask_dict(item, depth, max_depth)
    if isinstance(item, str):
        return mask_sensitive_string(item)
    return item
