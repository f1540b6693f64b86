"""
Endpoint shapes for Cloudflare Workers AI.

Two request/response schemas are supported:

- responses: ``/ai/v1/responses`` with an ``input`` message list. Text lives
  in ``output[].content[].text`` for ``output`` items of type ``message``.
- run: ``/ai/run/<model>`` with a ``messages`` list and ``stream: true``.
  Text is the flat ``response`` string, wrapped in ``result`` when the
  endpoint answers without streaming.

A shape is picked once at startup; the decoders only ever call
``extract_stream_text`` and ``extract_final_text`` on it.
"""
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Sequence

from cfchat.models import Message, json_string

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.cloudflare.com/client/v4"
DEFAULT_TEMPERATURE = 0.7


@dataclass(frozen=True)
class PreparedRequest:
    """A fully-formed request: target URL, JSON body and the new user line."""
    url: str
    body: str
    user_line: str


def build_messages_json(lines: Sequence[str]) -> str:
    """Join pre-serialized JSON objects into a JSON array without re-encoding them."""
    return "[" + ",".join(lines) + "]"


def _output_message_text(document: Any) -> str:
    # .output[] | select(.type == "message") | .content[]?.text
    if not isinstance(document, dict):
        return ""
    output = document.get("output")
    if not isinstance(output, list):
        return ""
    parts: List[str] = []
    for item in output:
        if not isinstance(item, dict) or item.get("type") != "message":
            continue
        content = item.get("content")
        if not isinstance(content, list):
            continue
        for entry in content:
            if isinstance(entry, dict) and isinstance(entry.get("text"), str):
                parts.append(entry["text"])
    return "".join(parts)


class EndpointShape(ABC):
    """Request construction and text extraction for one endpoint schema."""

    name: str = ""
    default_model: str = ""
    default_history_file: Path = Path()
    command: str = "cfchat"

    @abstractmethod
    def url(self, base_url: str, account_id: str, model: str) -> str:
        pass

    @abstractmethod
    def body(self, model: str, messages_json: str, temperature: float) -> str:
        pass

    @abstractmethod
    def extract_stream_text(self, payload: Dict[str, Any]) -> str:
        """Text carried by one streamed ``data:`` frame, or ``""``."""
        pass

    @abstractmethod
    def extract_final_text(self, document: Any) -> str:
        """Text carried by a complete non-streamed response body, or ``""``."""
        pass

    def build_request(
        self,
        *,
        history: Sequence[str],
        message: str,
        model: str,
        account_id: str,
        base_url: str = DEFAULT_BASE_URL,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> PreparedRequest:
        """
        Build the request for ``message`` replayed after ``history``.

        The messages array holds every history line verbatim followed by the
        new user message, so its length is always ``len(history) + 1``.
        """
        user_line = Message(role="user", content=message).to_line()
        messages_json = build_messages_json([*history, user_line])
        prepared = PreparedRequest(
            url=self.url(base_url.rstrip("/"), account_id, model),
            body=self.body(model, messages_json, temperature),
            user_line=user_line,
        )
        logger.debug(
            "Built %s request for model %s with %d messages",
            self.name,
            model,
            len(history) + 1,
        )
        return prepared


class ResponsesShape(EndpointShape):
    name = "responses"
    default_model = "@cf/openai/gpt-oss-120b"
    default_history_file = Path("/tmp/osschat_messages")
    command = "osschat"

    def url(self, base_url: str, account_id: str, model: str) -> str:
        return f"{base_url}/accounts/{account_id}/ai/v1/responses"

    def body(self, model: str, messages_json: str, temperature: float) -> str:
        return (
            '{"model":' + json_string(model)
            + ',"input":' + messages_json
            + ',"temperature":' + json.dumps(temperature)
            + "}"
        )

    def extract_stream_text(self, payload: Dict[str, Any]) -> str:
        return _output_message_text(payload)

    def extract_final_text(self, document: Any) -> str:
        return _output_message_text(document)


class RunShape(EndpointShape):
    name = "run"
    default_model = "@cf/meta/llama-4-scout-17b-16e-instruct"
    default_history_file = Path("/tmp/llamachat_messages")
    command = "llamachat"

    def url(self, base_url: str, account_id: str, model: str) -> str:
        return f"{base_url}/accounts/{account_id}/ai/run/{model}"

    def body(self, model: str, messages_json: str, temperature: float) -> str:
        return (
            '{"messages":' + messages_json
            + ',"temperature":' + json.dumps(temperature)
            + ',"stream":true}'
        )

    def extract_stream_text(self, payload: Dict[str, Any]) -> str:
        text = payload.get("response")
        return text if isinstance(text, str) else ""

    def extract_final_text(self, document: Any) -> str:
        if not isinstance(document, dict):
            return ""
        text = None
        result = document.get("result")
        if isinstance(result, dict):
            text = result.get("response")
        if text is None:
            text = document.get("response")
        if isinstance(text, str) and text:
            return text
        return ""


SHAPES: Dict[str, EndpointShape] = {
    ResponsesShape.name: ResponsesShape(),
    RunShape.name: RunShape(),
}


def get_shape(name: str) -> EndpointShape:
    """Look up a registered shape by name (``responses`` or ``run``)."""
    try:
        return SHAPES[name]
    except KeyError:
        raise ValueError(
            f"Unknown endpoint shape: {name!r} (expected one of {', '.join(SHAPES)})"
        ) from None


__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_TEMPERATURE",
    "EndpointShape",
    "PreparedRequest",
    "ResponsesShape",
    "RunShape",
    "SHAPES",
    "build_messages_json",
    "get_shape",
]
