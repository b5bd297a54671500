"""Test doubles for the chat completions endpoint."""
from .responses import MockResponse, completion_body, error_body
from .server import MockCompletionServer

__all__ = [
    "MockCompletionServer",
    "MockResponse",
    "completion_body",
    "error_body",
]
