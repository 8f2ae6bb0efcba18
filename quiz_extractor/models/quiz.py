"""Pydantic models for quiz data structures."""

from enum import Enum

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator


class QuizType(str, Enum):
    """Requested quiz format."""

    MULTIPLE_CHOICE = "multiple-choice"
    TEXT_ANSWER = "text-answer"
    MIXED = "mixed"


class QuestionKind(str, Enum):
    """Format of a single parsed question."""

    MULTIPLE_CHOICE = "multiple-choice"
    TEXT_ANSWER = "text-answer"


class Difficulty(str, Enum):
    """Quiz difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"


class QuizLanguage(str, Enum):
    """Language the quiz content is generated in."""

    ENGLISH = "english"
    ARABIC = "arabic"


class ModelTier(str, Enum):
    """Completion model tier: faster/cheaper or higher quality."""

    FAST = "fast"
    QUALITY = "quality"


def is_complete_question(
    kind: QuestionKind | None, options: list[str], correct_index: int
) -> bool:
    """
    Check the completeness invariant for a (possibly in-progress) question.

    A question with no kind yet is judged by its shape alone: one option at
    index 0 reads as a text answer, two or more options with an answer index
    read as multiple choice.

    Args:
        kind: Question kind, or None when no answer line has set it
        options: Collected options (the reference answer for text answers)
        correct_index: Index of the correct option, -1 when unknown

    Returns:
        True if the question may be surfaced
    """
    text_answer = len(options) == 1 and correct_index == 0
    choice = len(options) >= 2 and 0 <= correct_index < len(options)

    if kind == QuestionKind.TEXT_ANSWER:
        return text_answer
    if kind == QuestionKind.MULTIPLE_CHOICE:
        return choice
    return text_answer or choice


class Question(BaseModel):
    """A single quiz question, either multiple choice or free text."""

    text: str = Field(..., min_length=1, description="The question text")
    kind: QuestionKind = Field(
        default=QuestionKind.MULTIPLE_CHOICE,
        description="Question format",
    )
    options: list[str] = Field(
        ...,
        description="Choices in order; for text answers, the single reference answer",
    )
    correct_index: int = Field(
        ...,
        description="Index of the correct option (always 0 for text answers)",
    )
    explanation: str | None = Field(
        None,
        description="Explanation of the correct answer",
    )

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        """Ensure the question text is not blank."""
        v = v.strip()
        if not v:
            raise ValueError("Question text cannot be empty")
        return v

    @model_validator(mode="after")
    def validate_complete(self) -> "Question":
        """Refuse to build a question that breaks the completeness invariant."""
        if not is_complete_question(self.kind, self.options, self.correct_index):
            raise ValueError(
                f"Incomplete {self.kind.value} question: "
                f"{len(self.options)} option(s), correct index {self.correct_index}"
            )
        return self

    @property
    def correct_option(self) -> str:
        """Text of the correct option (the reference answer for text answers)."""
        return self.options[self.correct_index]

    model_config = {
        "json_schema_extra": {
            "example": {
                "text": "What is the capital of France?",
                "kind": "multiple-choice",
                "options": ["London", "Berlin", "Paris", "Madrid"],
                "correct_index": 2,
                "explanation": "Paris has been the capital of France since 987 AD.",
            }
        }
    }


class Quiz(BaseModel):
    """A complete parsed quiz."""

    title: str = Field(..., min_length=1, description="Quiz title")
    description: str = Field(default="", description="Quiz description")
    subject: str = Field(..., description="Quiz subject")
    difficulty: Difficulty = Field(
        default=Difficulty.MEDIUM,
        description="Overall difficulty level",
    )
    category: str = Field(..., description="Quiz category label")
    questions: list[Question] = Field(
        ...,
        min_length=1,
        description="Questions in order",
    )
    time_limit_minutes: int = Field(
        default=0,
        ge=0,
        description="Time limit in minutes (0 = unlimited)",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def max_score(self) -> int:
        """Maximum attainable score: one point per question."""
        return len(self.questions)

    def get_questions_by_kind(self, kind: QuestionKind) -> list[Question]:
        """Get all questions of a specific kind."""
        return [q for q in self.questions if q.kind == kind]

    model_config = {
        "json_schema_extra": {
            "example": {
                "title": "Geography Quiz",
                "description": "AI-generated easy difficulty quiz about Geography",
                "subject": "Geography",
                "difficulty": "easy",
                "category": "AI Generated",
                "questions": [],
                "time_limit_minutes": 5,
            }
        }
    }


class QuizConfiguration(BaseModel):
    """User configuration for quiz generation. Immutable once submitted."""

    type: QuizType = Field(
        default=QuizType.MULTIPLE_CHOICE,
        description="Quiz format",
    )
    difficulty: Difficulty = Field(
        default=Difficulty.MEDIUM,
        description="Overall difficulty level",
    )
    question_count: int = Field(
        default=5,
        ge=1,
        description="Number of questions to generate",
    )
    time_limit_minutes: int = Field(
        default=0,
        ge=0,
        description="Time limit in minutes (0 = unlimited)",
    )
    subject: str | None = Field(None, description="Quiz subject")
    custom_instructions: str | None = Field(
        None,
        description="Extra requirements appended to the prompt verbatim",
    )
    quiz_language: QuizLanguage = Field(
        default=QuizLanguage.ENGLISH,
        description="Language of the generated questions and answers",
    )
    source_text: str | None = Field(
        None,
        description="Document excerpt the questions must be drawn from",
    )
    model_tier: ModelTier = Field(
        default=ModelTier.FAST,
        description="Completion model tier",
    )

    @field_validator("subject", "custom_instructions", "source_text")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat blank optional text as absent."""
        if v is None or not v.strip():
            return None
        return v.strip()

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "type": "multiple-choice",
                "difficulty": "medium",
                "question_count": 10,
                "time_limit_minutes": 15,
                "subject": "World History",
                "quiz_language": "english",
            }
        },
    }


class QuizAttempt(BaseModel):
    """Answers given while taking a quiz."""

    answers: dict[int, int | str] = Field(
        default_factory=dict,
        description="Question index -> chosen option index or submitted text",
    )
    elapsed_seconds: float = Field(default=0.0, ge=0.0)

    def record(self, question_index: int, answer: int | str) -> None:
        """Store (or replace) the answer for a question."""
        self.answers[question_index] = answer

    def score(self, quiz: Quiz) -> int:
        """Count questions whose stored answer equals the correct index."""
        correct = 0
        for index, question in enumerate(quiz.questions):
            answer = self.answers.get(index)
            if isinstance(answer, int) and answer == question.correct_index:
                correct += 1
        return correct

    def to_results(self, quiz: Quiz) -> "QuizResults":
        """Snapshot this attempt as results for the history store."""
        return QuizResults(
            score=self.score(quiz),
            total_questions=quiz.max_score,
            elapsed_seconds=self.elapsed_seconds,
            answers=dict(self.answers),
        )


class QuizResults(BaseModel):
    """Stored outcome of a completed attempt."""

    score: int = Field(..., ge=0)
    total_questions: int = Field(..., ge=1)
    elapsed_seconds: float = Field(default=0.0, ge=0.0)
    answers: dict[int, int | str] = Field(default_factory=dict)

    @property
    def percentage(self) -> float:
        """Score as a percentage of the total."""
        return self.score / self.total_questions * 100

    @property
    def grade(self) -> str:
        """Letter grade for the percentage."""
        pct = self.percentage
        if pct >= 90:
            return "A+"
        if pct >= 80:
            return "A"
        if pct >= 70:
            return "B"
        if pct >= 60:
            return "C"
        return "F"
