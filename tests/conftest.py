"""Shared test fixtures and configuration for pytest."""

from collections.abc import Callable

import pytest

from quiz_extractor.config.settings import get_settings
from quiz_extractor.models.quiz import (
    Difficulty,
    ModelTier,
    Question,
    QuestionKind,
    Quiz,
    QuizConfiguration,
    QuizType,
)
from quiz_extractor.storage import HistoryStore, JsonFileStore

MULTIPLE_CHOICE_RESPONSE = """### **Solar System Quiz**

Here is a medium difficulty quiz about the Solar System.

1. Which planet is closest to the Sun?
a) Venus
b) Mercury
c) Earth
d) Mars
Correct Answer: b)

2. What is the largest planet in the Solar System?
a) Saturn
b) Neptune
c) Jupiter
d) Uranus
Correct Answer: c)
Explanation: Jupiter is more than twice as massive as all other planets combined.
"""

ARABIC_RESPONSE = """### اختبار الجغرافيا

1. ما هي عاصمة مصر؟
أ) القاهرة
ب) الإسكندرية
ج) أسوان
د) الأقصر
الإجابة الصحيحة: أ)

2. ما هو أطول نهر في العالم؟
أ) الأمازون
ب) النيل
ج) المسيسيبي
د) اليانغتسي
الإجابة الصحيحة: ب)
"""


@pytest.fixture
def sample_config() -> QuizConfiguration:
    """Create a sample QuizConfiguration for testing."""
    return QuizConfiguration(
        type=QuizType.MULTIPLE_CHOICE,
        difficulty=Difficulty.EASY,
        question_count=2,
        subject="Solar System",
    )


@pytest.fixture
def sample_question() -> Question:
    """Create a sample multiple-choice Question for testing."""
    return Question(
        text="What is the capital of France?",
        kind=QuestionKind.MULTIPLE_CHOICE,
        options=["London", "Paris", "Berlin", "Madrid"],
        correct_index=1,
        explanation="Paris is the capital and largest city of France.",
    )


@pytest.fixture
def sample_questions(sample_question: Question) -> list[Question]:
    """Create a mixed list of sample questions for testing."""
    return [
        sample_question,
        Question(
            text="What is 2 + 2?",
            options=["3", "4", "5", "6"],
            correct_index=1,
        ),
        Question(
            text="Explain why the sky is blue.",
            kind=QuestionKind.TEXT_ANSWER,
            options=["Air molecules scatter blue light more than red light."],
            correct_index=0,
        ),
    ]


@pytest.fixture
def sample_quiz(sample_questions: list[Question]) -> Quiz:
    """Create a sample Quiz for testing."""
    return Quiz(
        title="Test Quiz",
        description="A comprehensive test quiz",
        subject="General Knowledge",
        difficulty=Difficulty.MEDIUM,
        category="AI Generated",
        questions=sample_questions,
        time_limit_minutes=5,
    )


@pytest.fixture
def arabic_quiz() -> Quiz:
    """Create an Arabic Quiz for testing."""
    return Quiz(
        title="اختبار الجغرافيا",
        description="اختبار مُولد بالذكاء الاصطناعي بمستوى سهل حول الجغرافيا",
        subject="الجغرافيا",
        difficulty=Difficulty.EASY,
        category="مُولد بالذكاء الاصطناعي",
        questions=[
            Question(
                text="ما هي عاصمة مصر؟",
                options=["القاهرة", "الإسكندرية", "أسوان", "الأقصر"],
                correct_index=0,
            )
        ],
        time_limit_minutes=5,
    )


@pytest.fixture
def multiple_choice_response() -> str:
    """A model response holding a two-question multiple-choice quiz."""
    return MULTIPLE_CHOICE_RESPONSE


@pytest.fixture
def arabic_response() -> str:
    """An Arabic model response holding a two-question quiz."""
    return ARABIC_RESPONSE


@pytest.fixture
def history_store(tmp_path) -> HistoryStore:
    """A history store backed by a temporary file."""
    return HistoryStore(JsonFileStore(tmp_path / "history.json"))


@pytest.fixture
def isolated_settings(tmp_path, monkeypatch):
    """Point settings at a temporary history file with a dummy API key."""
    monkeypatch.setenv("HISTORY_PATH", str(tmp_path / "history.json"))
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key")
    monkeypatch.setenv("UI_LANGUAGE", "en")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


class FakeAsk:
    """Completion callable returning canned responses and recording prompts."""

    def __init__(self, responses: list[str] | str, error: Exception | None = None):
        self.responses = [responses] if isinstance(responses, str) else list(responses)
        self.error = error
        self.calls: list[tuple[str, ModelTier]] = []

    def __call__(self, prompt: str, tier: ModelTier = ModelTier.FAST) -> str:
        self.calls.append((prompt, tier))
        if self.error is not None:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


@pytest.fixture
def fake_ask() -> Callable[..., FakeAsk]:
    """Factory for FakeAsk completion callables."""
    return FakeAsk
