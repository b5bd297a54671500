"""Structured error types for the chat client."""
from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorType(Enum):
    """Classification of chat errors."""

    FATAL = "fatal"
    RECOVERABLE = "recoverable"


class ChatError(Exception):
    """Base class for failures surfaced to the user."""

    def __init__(self, message: str, error_type: ErrorType = ErrorType.RECOVERABLE) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type

    @property
    def recoverable(self) -> bool:
        return self.error_type is ErrorType.RECOVERABLE

    def __str__(self) -> str:  # pragma: no cover - convenience
        return self.message


class ConfigurationError(ChatError):
    """Required configuration is missing; raised before any network use."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorType.FATAL)


class NetworkError(ChatError):
    """The endpoint could not be reached (DNS, connection, timeout)."""


class ApiError(ChatError):
    """The endpoint answered with a non-success status."""

    def __init__(self, status_code: int, detail: Optional[str] = None) -> None:
        self.status_code = status_code
        self.detail = detail or "Unknown error"
        super().__init__(f"API Error ({status_code}): {self.detail}")


class ParseError(ChatError):
    """A success response whose body has no usable reply."""


__all__ = [
    "ApiError",
    "ChatError",
    "ConfigurationError",
    "ErrorType",
    "NetworkError",
    "ParseError",
]
