"""Conversation state for a single chat session."""
from .state import SYSTEM_PROMPT, ChatSession, apply_log_level
from .transcript import Message, Role, Transcript

__all__ = [
    "ChatSession",
    "Message",
    "Role",
    "SYSTEM_PROMPT",
    "Transcript",
    "apply_log_level",
]
