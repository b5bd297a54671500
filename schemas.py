"""Pydantic schemas for the chat completions wire format."""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError


class WireSchema(BaseModel):
    """Base class for payloads received from the endpoint; unknown keys are ignored."""

    model_config = {
        "extra": "ignore",
    }


class ChatMessage(BaseModel):
    model_config = {"extra": "forbid"}

    role: Literal["system", "user", "assistant"]
    content: str


class CompletionRequest(BaseModel):
    model_config = {"extra": "forbid"}

    model: str = Field(..., min_length=1)
    messages: List[ChatMessage] = Field(..., min_length=1)
    temperature: float = Field(..., ge=0.0, le=2.0)
    max_tokens: int = Field(..., gt=0)

    def dump(self) -> Dict[str, Any]:
        return self.model_dump()


class ChoiceMessage(WireSchema):
    role: Optional[str] = None
    content: str


class Choice(WireSchema):
    index: Optional[int] = None
    message: ChoiceMessage
    finish_reason: Optional[str] = None


class Usage(WireSchema):
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None


class CompletionResponse(WireSchema):
    """Success body; only the first choice is validated."""

    id: Optional[Any] = None
    model: Optional[Any] = None
    choices: List[Any] = Field(..., min_length=1)
    usage: Optional[Any] = None

    def first_choice(self) -> Choice:
        """Raise ``ValidationError`` when the first choice has no message content."""
        return Choice.model_validate(self.choices[0])

    def usage_report(self) -> Optional[Usage]:
        try:
            return Usage.model_validate(self.usage) if self.usage is not None else None
        except ValidationError:
            return None


class ErrorDetail(WireSchema):
    message: Optional[str] = None
    type: Optional[Any] = None
    code: Optional[Any] = None


class ErrorBody(WireSchema):
    error: Optional[ErrorDetail] = None


__all__ = [
    "ChatMessage",
    "Choice",
    "ChoiceMessage",
    "CompletionRequest",
    "CompletionResponse",
    "ErrorBody",
    "ErrorDetail",
    "Usage",
]
