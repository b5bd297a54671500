"""Per-process chat session state."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from .transcript import Role, Transcript

SYSTEM_PROMPT = """You are DUSZEK, a lightweight CLI AI assistant designed to help with coding and automation tasks.
You provide concise, practical answers. You focus on:
- Writing and debugging code
- Explaining programming concepts
- Suggesting automation solutions
- Helping with command-line tasks
- Providing quick technical guidance

Keep responses clear and to the point. When writing code, use markdown code blocks with language specification."""

logger = logging.getLogger(__name__)


@dataclass
class ChatSession:
    """Owns the transcript and the verbose-diagnostics flag for one run."""

    system_prompt: str = SYSTEM_PROMPT
    verbose: bool = False
    transcript: Transcript = field(init=False)

    def __post_init__(self) -> None:
        self.transcript = Transcript(self.system_prompt)

    @property
    def turns(self) -> int:
        return (len(self.transcript) - 1) // 2

    def add_user_message(self, text: str) -> None:
        self.transcript.append(Role.USER, text)

    def add_assistant_message(self, text: str) -> None:
        self.transcript.append(Role.ASSISTANT, text)

    def clear(self) -> None:
        self.transcript.reset()
        logger.debug("Transcript reset to system prompt")

    def set_verbose(self, enabled: bool) -> None:
        self.verbose = enabled
        apply_log_level(enabled)

    def toggle_verbose(self) -> bool:
        self.set_verbose(not self.verbose)
        return self.verbose


def apply_log_level(verbose: bool, root: Optional[logging.Logger] = None) -> None:
    """Raise the root logger to DEBUG while diagnostics are on."""

    target = root or logging.getLogger()
    target.setLevel(logging.DEBUG if verbose else logging.WARNING)


__all__ = ["ChatSession", "SYSTEM_PROMPT", "apply_log_level"]
