"""
One chat turn: replay history, stream the reply, persist on success.

Usage:
    session = ChatSession(ChatConfig.from_env(get_shape("run")))
    result = session.run("hello there")
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

from cfchat.config import ChatConfig
from cfchat.exceptions import EmptyResponseError
from cfchat.history import TranscriptStore
from cfchat.llm.fallback import decode_fallback
from cfchat.llm.stream import StreamDecoder
from cfchat.llm.transport import WorkersAIClient
from cfchat.models import Message, SessionResult

logger = logging.getLogger(__name__)


class ChatSession:
    """Drives a single request/response exchange against one endpoint shape."""

    def __init__(
        self,
        config: ChatConfig,
        *,
        client: Optional[WorkersAIClient] = None,
        store: Optional[TranscriptStore] = None,
        sink: Optional[TextIO] = None,
    ):
        self.config = config
        self.shape = config.shape
        self.client = client or WorkersAIClient(api_key=config.api_key)
        self.store = store or TranscriptStore(config.history_path)
        self._sink = sink

    @property
    def sink(self) -> TextIO:
        return self._sink if self._sink is not None else sys.stdout

    def run(self, message: str) -> SessionResult:
        """
        Send ``message`` after the stored history and render the reply.

        The transcript is rewritten only when reply text was obtained; both
        the user and the assistant line are appended in the same save.

        Raises:
            EndpointError: The non-streamed body reported an error.
            EmptyResponseError: Neither decoder produced any text.
        """
        history = self.store.load()
        request = self.shape.build_request(
            history=history,
            message=message,
            model=self.config.model,
            account_id=self.config.account_id,
            base_url=self.config.base_url,
            temperature=self.config.temperature,
        )

        decoder = StreamDecoder(self.shape, self.sink)
        result = decoder.decode(self.client.stream(request))

        if not result.streamed:
            logger.debug("No data frames received; decoding buffered body")
            text = decode_fallback(decoder.raw_body, self.shape, self.sink)
            result = SessionResult(text=text, streamed=False)

        if not result.text:
            raise EmptyResponseError(context={"streamed": result.streamed})

        self.sink.write("\n")
        self.sink.flush()

        assistant_line = Message(role="assistant", content=result.text).to_line()
        self.store.save(self.store.append(history, request.user_line, assistant_line))
        logger.debug(f"Persisted turn to {self.store.path}")
        return result


__all__ = ["ChatSession"]
