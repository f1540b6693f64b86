from __future__ import annotations

import re
from typing import Any

_SENSITIVE_KEY_RE = re.compile(
    r"(?i)(password|passwd|token|api[_-]?key|secret|authorization|cookie|set-cookie)"
)
_BEARER_RE = re.compile(r"(?i)\bbearer\s+\S+")


def _redact_string(value: str) -> str:
    return _BEARER_RE.sub("Bearer <REDACTED>", value)


def redact(value: Any) -> Any:
    """Best-effort redaction for debug logs (keeps structure, removes credentials)."""
    if value is None:
        return None

    if isinstance(value, str):
        return _redact_string(value)

    if isinstance(value, bytes):
        return "<REDACTED_BYTES>"

    if isinstance(value, dict):
        redacted: dict[Any, Any] = {}
        for key, child in value.items():
            if isinstance(key, str) and _SENSITIVE_KEY_RE.search(key):
                redacted[key] = "<REDACTED>"
                continue
            redacted[key] = redact(child)
        return redacted

    if isinstance(value, (list, tuple)):
        return [redact(item) for item in value]

    return value


__all__ = ["redact"]
