"""Wire format, decoding and classification shared by the Google backends."""

from .adapter import Endpoint, GoogleGenerativeProviderBase
from .request_builder import build_chat_request, build_count_tokens_request
from .response_classifier import classify
from .stream_decoder import decode_final, try_decode_partial
from .streaming_call import StreamingChatCall, StreamState

__all__ = [
    "Endpoint",
    "GoogleGenerativeProviderBase",
    "build_chat_request",
    "build_count_tokens_request",
    "classify",
    "decode_final",
    "try_decode_partial",
    "StreamingChatCall",
    "StreamState",
]
