from __future__ import annotations

from typing import Any, Dict, Optional


class ChatError(Exception):
    """Base exception for fatal chat failures.

    Every subclass aborts the run: the CLI prints ``message`` to stderr and
    exits with status 1. Nothing is written to the transcript.

    Attributes:
        message: Human-readable error message.
        context: Optional contextual metadata.
        original_exception: The underlying exception, if any.

    Example:
        >>> raise ChatError("failed", context={"stage": "request"})
    """

    def __init__(
        self,
        message: str = "",
        *,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception


class ConfigurationError(ChatError):
    """Raised when a required credential is missing or empty.

    Example:
        >>> raise ConfigurationError("Missing CLOUDFLARE_AI_API_KEY.")
    """


class UsageError(ChatError):
    """Raised when no message text could be resolved or an option value is invalid.

    Example:
        >>> raise UsageError("Usage: osschat [--model model-name] your message")
    """


class EndpointError(ChatError):
    """Raised when the endpoint answers with a non-null ``error`` field.

    Example:
        >>> raise EndpointError("rate limited")
    """

    def __init__(
        self,
        detail: str,
        *,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[BaseException] = None,
    ):
        super().__init__(
            f"Endpoint error: {detail}",
            context=context,
            original_exception=original_exception,
        )
        self.detail = detail


class EmptyResponseError(ChatError):
    """Raised when neither decoder produced any assistant text.

    Example:
        >>> raise EmptyResponseError()
    """

    def __init__(
        self,
        message: str = "No response received from LLM.",
        *,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[BaseException] = None,
    ):
        super().__init__(
            message,
            context=context,
            original_exception=original_exception,
        )


__all__ = [
    "ChatError",
    "ConfigurationError",
    "UsageError",
    "EndpointError",
    "EmptyResponseError",
]
