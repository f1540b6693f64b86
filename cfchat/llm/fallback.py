"""Whole-body decoding for endpoints that answered without streaming."""
from __future__ import annotations

import json
import logging
from typing import Any, TextIO

from cfchat.exceptions import EndpointError
from cfchat.llm.shapes import EndpointShape

logger = logging.getLogger(__name__)

UNKNOWN_ENDPOINT_ERROR = "Unknown endpoint error"


def raise_for_endpoint_error(document: Any) -> None:
    """
    Raise EndpointError when ``document`` carries a non-null ``error`` field.

    The message comes from ``error.message`` when that is a string, otherwise
    a generic placeholder is used.
    """
    if not isinstance(document, dict):
        return
    error = document.get("error")
    if error is None:
        return
    message = error.get("message") if isinstance(error, dict) else None
    if not isinstance(message, str):
        message = UNKNOWN_ENDPOINT_ERROR
    logger.debug("Endpoint reported error: %s", error)
    raise EndpointError(message, context={"error": error})


def decode_fallback(body: str, shape: EndpointShape, sink: TextIO) -> str:
    """
    Decode a complete non-streamed response body.

    Args:
        body: Newline-joined passthrough lines collected by the stream decoder.
        shape: Endpoint shape used for text extraction.
        sink: Output stream; extracted text is written to it once.

    Returns:
        The extracted text, or ``""`` when the body holds none.

    Raises:
        EndpointError: If the body is a JSON object with a non-null ``error``.
    """
    try:
        document = json.loads(body)
    except ValueError as e:
        logger.debug(f"Buffered body is not JSON: {e}")
        return ""

    raise_for_endpoint_error(document)

    text = shape.extract_final_text(document)
    if text:
        sink.write(text)
        sink.flush()
    else:
        logger.debug("Buffered body carried no %s text", shape.name)
    return text


__all__ = ["UNKNOWN_ENDPOINT_ERROR", "decode_fallback", "raise_for_endpoint_error"]
