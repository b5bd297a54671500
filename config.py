"""Environment-driven configuration for the Groq chat client."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from errors import ConfigurationError

GROQ_API_URL = "https://api.groq.com/openai/v1/chat/completions"
DEFAULT_MODEL = "llama-3.1-70b-versatile"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2048
DEFAULT_TIMEOUT_SECONDS = 30.0
MAX_TEMPERATURE = 2.0

SETUP_INSTRUCTIONS = (
    "To use DUSZEK, you need to:\n"
    "1. Get a free API key from https://console.groq.com\n"
    "2. Create a .env file in the project directory\n"
    "3. Add your key: GROQ_API_KEY=your_key_here\n"
    f"\nOptionally, you can also set MODEL (default: {DEFAULT_MODEL})"
)


@dataclass(frozen=True)
class ChatConfig:
    """Settings for one chat session."""

    api_key: str
    model: str = DEFAULT_MODEL
    api_url: str = GROQ_API_URL
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def masked_key(self) -> str:
        """Return the credential trimmed for display in diagnostics."""

        if len(self.api_key) <= 10:
            return "*" * len(self.api_key)
        return f"{self.api_key[:10]}..."


def _parse_positive_int(raw: Optional[str], fallback: int) -> int:
    """Return a positive integer parsed from *raw*, or *fallback* on failure."""

    if raw is None:
        return fallback
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return fallback
    return value if value > 0 else fallback


def _parse_float(raw: Optional[str], fallback: float, *, low: float, high: Optional[float] = None) -> float:
    if raw is None:
        return fallback
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return fallback
    if value < low or (high is not None and value > high):
        return fallback
    return value


def load_chat_config(environ: Optional[Mapping[str, str]] = None) -> ChatConfig:
    """Load chat settings from the environment.

    Raises ``ConfigurationError`` when ``GROQ_API_KEY`` is missing or blank;
    every other setting falls back to its default when absent or invalid.
    """

    env = os.environ if environ is None else environ

    api_key = (env.get("GROQ_API_KEY") or "").strip()
    if not api_key:
        raise ConfigurationError("GROQ_API_KEY not configured!")

    model = (env.get("MODEL") or "").strip() or DEFAULT_MODEL
    api_url = (env.get("GROQ_API_URL") or "").strip() or GROQ_API_URL
    temperature = _parse_float(
        env.get("DUSZEK_TEMPERATURE"), DEFAULT_TEMPERATURE, low=0.0, high=MAX_TEMPERATURE
    )
    max_tokens = _parse_positive_int(env.get("DUSZEK_MAX_TOKENS"), DEFAULT_MAX_TOKENS)
    timeout = _parse_float(env.get("DUSZEK_TIMEOUT"), DEFAULT_TIMEOUT_SECONDS, low=0.0)
    if timeout == 0:
        timeout = DEFAULT_TIMEOUT_SECONDS

    return ChatConfig(
        api_key=api_key,
        model=model,
        api_url=api_url,
        temperature=temperature,
        max_tokens=max_tokens,
        timeout_seconds=timeout,
    )


__all__ = [
    "ChatConfig",
    "DEFAULT_MAX_TOKENS",
    "DEFAULT_MODEL",
    "DEFAULT_TEMPERATURE",
    "DEFAULT_TIMEOUT_SECONDS",
    "GROQ_API_URL",
    "SETUP_INSTRUCTIONS",
    "load_chat_config",
]
