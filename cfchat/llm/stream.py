"""
Incremental decoder for server-sent-event response bodies.

Bytes are fed in as they arrive from the transport. Complete lines are
classified as ``data:`` frames or passthrough lines. Frame text is written
to the sink as soon as it is extracted; passthrough lines are kept so the
fallback decoder can parse them as one JSON document when the endpoint
never streamed.
"""
from __future__ import annotations

import codecs
import json
import logging
from typing import Any, Dict, Iterable, List, Optional, TextIO

from cfchat.llm.shapes import EndpointShape
from cfchat.models import SessionResult

logger = logging.getLogger(__name__)

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"


def data_payload(line: str) -> Optional[str]:
    """Payload of a ``data:`` line with at most one leading space removed; ``None`` otherwise."""
    if not line.startswith(DATA_PREFIX):
        return None
    payload = line[len(DATA_PREFIX):]
    if payload.startswith(" "):
        payload = payload[1:]
    return payload


def parse_event(payload: str) -> Optional[Dict[str, Any]]:
    """Parse one frame payload; ``None`` when it is not a JSON object."""
    try:
        event = json.loads(payload)
    except ValueError as e:
        logger.debug(f"Skipping unparseable frame: {e}")
        return None
    if not isinstance(event, dict):
        logger.debug("Skipping non-object frame: %r", payload[:80])
        return None
    return event


class StreamDecoder:
    """Line-oriented SSE decoder for a single response."""

    def __init__(self, shape: EndpointShape, sink: TextIO):
        self.shape = shape
        self.sink = sink
        self.streamed = False
        self.raw_lines: List[str] = []
        self._parts: List[str] = []
        self._pending = ""
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @property
    def text(self) -> str:
        return "".join(self._parts)

    @property
    def raw_body(self) -> str:
        """Every passthrough line, newline-joined."""
        return "\n".join(self.raw_lines)

    def feed(self, chunk: bytes) -> None:
        self._pending += self._utf8.decode(chunk)
        *lines, self._pending = self._pending.split("\n")
        for line in lines:
            self._handle_line(line)

    def close(self) -> SessionResult:
        self._pending += self._utf8.decode(b"", final=True)
        if self._pending:
            line, self._pending = self._pending, ""
            self._handle_line(line)
        logger.debug(
            "Stream closed: streamed=%s, %d chars, %d passthrough lines",
            self.streamed,
            len(self.text),
            len(self.raw_lines),
        )
        return SessionResult(text=self.text, streamed=self.streamed)

    def decode(self, chunks: Iterable[bytes]) -> SessionResult:
        """Consume ``chunks`` until the transport is exhausted."""
        for chunk in chunks:
            self.feed(chunk)
        return self.close()

    def _handle_line(self, line: str) -> None:
        if line.endswith("\r"):
            line = line[:-1]
        payload = data_payload(line)
        if payload is None:
            self.raw_lines.append(line)
            return

        self.streamed = True
        if payload == "" or payload == DONE_SENTINEL:
            return

        event = parse_event(payload)
        if event is None:
            return
        text = self.shape.extract_stream_text(event)
        if text:
            self._emit(text)

    def _emit(self, text: str) -> None:
        self.sink.write(text)
        self.sink.flush()
        self._parts.append(text)


__all__ = ["DATA_PREFIX", "DONE_SENTINEL", "StreamDecoder", "data_payload", "parse_event"]
