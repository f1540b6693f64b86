"""
HTTP transport for Cloudflare Workers AI.

Posts a prepared request and yields the response body as raw byte chunks
while it is still arriving. The status code is not interpreted: error
bodies flow through to the decoders so the endpoint's own ``error`` field
can be surfaced.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

import requests

from cfchat.llm.shapes import PreparedRequest
from cfchat.redaction import redact

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkersAIClient:
    """Streaming HTTPS client for one Workers AI account."""
    api_key: str
    timeout_seconds: Optional[float] = None

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "text/event-stream",
        }

    def stream(self, request: PreparedRequest) -> Iterator[bytes]:
        """
        POST ``request`` and yield body chunks as they arrive.

        Transport failures are logged and end the iteration early; the caller
        sees them as a body that produced no text.
        """
        headers = self._headers()
        logger.debug("POST %s headers=%s", request.url, redact(headers))
        logger.debug("Request body: %s", request.body)

        try:
            with requests.post(
                request.url,
                headers=headers,
                data=request.body.encode("utf-8"),
                stream=True,
                timeout=self.timeout_seconds,
            ) as response:
                if not response.ok:
                    logger.warning(
                        f"Workers AI returned HTTP {response.status_code} for {request.url}"
                    )
                for chunk in response.iter_content(chunk_size=None):
                    if chunk:
                        yield chunk
        except requests.exceptions.RequestException as e:
            logger.error(f"Workers AI request failed: {e}")


__all__ = ["WorkersAIClient"]
