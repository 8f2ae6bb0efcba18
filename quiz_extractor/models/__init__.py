"""Data models for quiz extraction and history."""

from .history import ChatMessage, ChatRecord, HistoryRecord, QuizRecord
from .quiz import (
    Difficulty,
    ModelTier,
    Question,
    QuestionKind,
    Quiz,
    QuizAttempt,
    QuizConfiguration,
    QuizLanguage,
    QuizResults,
    QuizType,
    is_complete_question,
)

__all__ = [
    "Question",
    "QuestionKind",
    "Quiz",
    "QuizAttempt",
    "QuizConfiguration",
    "QuizResults",
    "QuizType",
    "QuizLanguage",
    "Difficulty",
    "ModelTier",
    "is_complete_question",
    "ChatMessage",
    "ChatRecord",
    "QuizRecord",
    "HistoryRecord",
]
