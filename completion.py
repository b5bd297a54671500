"""Single-shot requests against an OpenAI-compatible chat completions endpoint."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence

import httpx
from pydantic import ValidationError

from config import ChatConfig
from errors import ApiError, NetworkError, ParseError
from schemas import CompletionRequest, CompletionResponse, ErrorBody
from session.transcript import Message

USER_AGENT = "DUSZEK/1.0"

logger = logging.getLogger(__name__)


@dataclass
class Exchange:
    """Diagnostics for the most recent request/response pair."""

    model: str
    message_count: int
    status_code: Optional[int] = None
    elapsed_seconds: float = 0.0
    usage: Dict[str, Any] = field(default_factory=dict)
    outcome: str = "pending"

    def describe(self) -> str:
        parts = [
            f"model={self.model}",
            f"messages={self.message_count}",
            f"status={self.status_code if self.status_code is not None else 'n/a'}",
            f"elapsed={self.elapsed_seconds:.2f}s",
            f"outcome={self.outcome}",
        ]
        if self.usage:
            tokens = ", ".join(f"{key}={value}" for key, value in self.usage.items() if value is not None)
            if tokens:
                parts.append(f"usage[{tokens}]")
        return " ".join(parts)


class CompletionRequester:
    """Send a transcript to the endpoint and return the assistant reply.

    Each call performs exactly one POST and never retries. Transport failures
    raise ``NetworkError``, non-2xx statuses raise ``ApiError`` and success
    bodies without ``choices[0].message.content`` raise ``ParseError``. The
    transcript passed in is never modified.
    """

    def __init__(self, config: ChatConfig, *, client: Optional[httpx.Client] = None) -> None:
        self._config = config
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=httpx.Timeout(config.timeout_seconds))
        self.last_exchange: Optional[Exchange] = None

    @property
    def config(self) -> ChatConfig:
        return self._config

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._config.api_key}",
            "User-Agent": USER_AGENT,
        }

    def complete(
        self,
        transcript_snapshot: Sequence[Message],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Return the reply text for *transcript_snapshot*.

        Parameters left as ``None`` come from the configuration. Out-of-range
        ``temperature`` or ``max_tokens`` values raise pydantic's
        ``ValidationError`` (a ``ValueError``) before anything is sent.
        """
        request = CompletionRequest(
            model=model or self._config.model,
            messages=[message.to_dict() for message in transcript_snapshot],
            temperature=self._config.temperature if temperature is None else temperature,
            max_tokens=self._config.max_tokens if max_tokens is None else max_tokens,
        )
        exchange = Exchange(model=request.model, message_count=len(request.messages))
        self.last_exchange = exchange

        logger.debug(
            "POST %s model=%s messages=%d temperature=%s max_tokens=%d",
            self._config.api_url,
            request.model,
            len(request.messages),
            request.temperature,
            request.max_tokens,
        )

        started = time.monotonic()
        try:
            response = self._client.post(
                self._config.api_url,
                json=request.dump(),
                headers=self._headers(),
                timeout=self._config.timeout_seconds,
            )
        except httpx.TimeoutException as exc:
            exchange.elapsed_seconds = time.monotonic() - started
            exchange.outcome = "network_error"
            logger.debug("Request timed out: %s", exc)
            raise NetworkError(
                f"Network error: Request timed out after {self._config.timeout_seconds:g} seconds."
            ) from exc
        except httpx.HTTPError as exc:
            exchange.elapsed_seconds = time.monotonic() - started
            exchange.outcome = "network_error"
            logger.debug("Transport failure: %r", exc)
            raise NetworkError(
                "Network error: Unable to connect to Groq API. Please check your internet connection."
            ) from exc

        exchange.elapsed_seconds = time.monotonic() - started
        exchange.status_code = response.status_code
        logger.debug("Response status=%d elapsed=%.2fs", response.status_code, exchange.elapsed_seconds)

        if not response.is_success:
            exchange.outcome = "api_error"
            raise ApiError(response.status_code, _error_detail(response))

        try:
            parsed = CompletionResponse.model_validate_json(response.content)
            choice = parsed.first_choice()
        except ValidationError as exc:
            exchange.outcome = "parse_error"
            logger.debug("Unusable completion body: %s", exc)
            raise ParseError(
                "Invalid response from API. The model may not be available or the response format changed."
            ) from exc

        usage = parsed.usage_report()
        if usage is not None:
            exchange.usage = usage.model_dump()
        exchange.outcome = "ok"
        return choice.message.content

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "CompletionRequester":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def _error_detail(response: httpx.Response) -> str:
    """Best-effort message for a failed response; never raises."""

    try:
        body = ErrorBody.model_validate_json(response.content)
    except ValidationError:
        body = None
    if body is not None and body.error is not None and body.error.message:
        return body.error.message
    return response.reason_phrase or "Unknown error"


__all__ = ["CompletionRequester", "Exchange", "USER_AGENT"]
