"""Pydantic models for persisted chat and quiz history."""

import uuid
from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from .quiz import Quiz, QuizResults


def new_record_id(prefix: str) -> str:
    """Generate an opaque record id such as ``quiz_1a2b3c4d5e6f``."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


class ChatMessage(BaseModel):
    """A single message in a chat transcript."""

    role: Literal["user", "assistant"]
    text: str
    timestamp: datetime = Field(default_factory=datetime.now)


class ChatRecord(BaseModel):
    """A saved chat conversation."""

    kind: Literal["chat"] = "chat"
    id: str = Field(default_factory=lambda: new_record_id("chat"))
    title: str = Field(..., min_length=1)
    messages: list[ChatMessage] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=datetime.now)


class QuizRecord(BaseModel):
    """A saved quiz, with results once it has been taken."""

    kind: Literal["quiz"] = "quiz"
    id: str = Field(default_factory=lambda: new_record_id("quiz"))
    title: str = Field(..., min_length=1)
    timestamp: datetime = Field(default_factory=datetime.now)
    quiz: Quiz
    results: QuizResults | None = None


HistoryRecord = Annotated[Union[ChatRecord, QuizRecord], Field(discriminator="kind")]

history_record_adapter: TypeAdapter[HistoryRecord] = TypeAdapter(HistoryRecord)
