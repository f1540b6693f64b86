from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict

Role = Literal["user", "assistant"]


def json_string(value: str) -> str:
    """Encode ``value`` as a quoted JSON string literal.

    Quotes and backslashes are escaped, ``\\b \\f \\n \\r \\t`` use their short
    forms and every other control character becomes ``\\u00XX``. Non-ASCII
    text is kept as-is.
    """
    return json.dumps(value, ensure_ascii=False)


class Message(BaseModel):
    """One conversation turn as stored in the transcript."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str

    def to_line(self) -> str:
        """Single-line JSON form: ``{"role":...,"content":...}``."""
        return '{"role":' + json_string(self.role) + ',"content":' + json_string(self.content) + "}"


@dataclass(frozen=True)
class SessionResult:
    """Outcome of decoding one response body."""

    text: str = ""
    streamed: bool = False


__all__ = ["Role", "Message", "SessionResult", "json_string"]
