"""Request building, transport and response decoding for Workers AI endpoints."""

from .fallback import decode_fallback
from .shapes import SHAPES, EndpointShape, PreparedRequest, ResponsesShape, RunShape, get_shape
from .stream import StreamDecoder
from .transport import WorkersAIClient

__all__ = [
    "SHAPES",
    "EndpointShape",
    "PreparedRequest",
    "ResponsesShape",
    "RunShape",
    "StreamDecoder",
    "WorkersAIClient",
    "decode_fallback",
    "get_shape",
]
