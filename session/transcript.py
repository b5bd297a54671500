"""Ordered, role-tagged conversation transcript."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Tuple, Union


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    role: Role
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class Transcript:
    """Conversation context sent with every completion request.

    The first entry is always the system message given at construction; later
    entries are appended in order and never reordered or deduplicated.
    """

    def __init__(self, system_prompt: str) -> None:
        if system_prompt is None:
            raise ValueError("System prompt must not be None")
        self._system = Message(Role.SYSTEM, system_prompt)
        self._messages: List[Message] = [self._system]

    @property
    def system_message(self) -> Message:
        return self._system

    def append(self, role: Union[Role, str], content: str) -> Message:
        if content is None:
            raise ValueError("Message content must not be None")
        message = Message(Role(role), content)
        self._messages.append(message)
        return message

    def reset(self) -> None:
        """Drop every turn, keeping only the original system message."""
        self._messages = [self._system]

    def snapshot(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.snapshot())


__all__ = ["Message", "Role", "Transcript"]
