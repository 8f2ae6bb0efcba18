"""Fast path: parse a fenced JSON quiz block embedded in a response."""

import json
import logging
import re
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from quiz_extractor.messages import UiLanguage
from quiz_extractor.models.quiz import Difficulty, Question, QuestionKind, Quiz, QuizConfiguration

from .metadata import build_quiz, default_header, header_from_config

logger = logging.getLogger(__name__)

JSON_BLOCK_RE = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL | re.IGNORECASE)


def _scalar_text(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return value


class StructuredQuestion(BaseModel):
    """One element of the block's ``questions`` array."""

    question: str
    options: list[str] = Field(..., min_length=2)
    correct_answer: int = Field(..., alias="correctAnswer")
    explanation: str | None = None

    @field_validator("options", mode="before")
    @classmethod
    def stringify_options(cls, v: Any) -> Any:
        """Render numeric options (e.g. years) as text."""
        if not isinstance(v, list):
            return v
        return [_scalar_text(option) for option in v]

    @field_validator("correct_answer", mode="before")
    @classmethod
    def validate_correct_answer(cls, v: Any) -> int:
        """Accept any JSON number with a whole value; strings and booleans are rejected."""
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("correctAnswer must be a number")
        if isinstance(v, float) and not v.is_integer():
            raise ValueError(f"correctAnswer {v} is not a whole number")
        return int(v)

    @field_validator("question")
    @classmethod
    def validate_question(cls, v: str) -> str:
        """Ensure the question text is not blank."""
        if not v.strip():
            raise ValueError("question cannot be empty")
        return v.strip()

    @model_validator(mode="after")
    def validate_answer_index(self) -> "StructuredQuestion":
        """Ensure correctAnswer addresses one of the options."""
        if not 0 <= self.correct_answer < len(self.options):
            raise ValueError(
                f"correctAnswer {self.correct_answer} out of range for "
                f"{len(self.options)} options"
            )
        return self

    def to_question(self) -> Question:
        """Convert to a multiple-choice Question."""
        return Question(
            text=self.question,
            kind=QuestionKind.MULTIPLE_CHOICE,
            options=self.options,
            correct_index=self.correct_answer,
            explanation=self.explanation,
        )


def find_json_block(text: str) -> str | None:
    """Return the body of the first fenced JSON object block, if any."""
    match = JSON_BLOCK_RE.search(text)
    return match.group(1) if match else None


def load_block(block: str) -> dict[str, Any] | None:
    """Decode a block into an object with a non-empty ``questions`` list."""
    try:
        data = json.loads(block)
    except json.JSONDecodeError as e:
        logger.debug("Malformed JSON quiz block: %s", e)
        return None

    if not isinstance(data, dict):
        logger.debug("JSON quiz block is not an object")
        return None
    questions = data.get("questions")
    if not isinstance(questions, list) or not questions:
        logger.debug("JSON quiz block has no questions array")
        return None
    return data


def validate_questions(raw_questions: list[Any]) -> list[Question]:
    """
    Validate every element independently and keep the ones that pass.

    Args:
        raw_questions: Decoded ``questions`` array

    Returns:
        Questions that satisfied the structural checks, in order
    """
    valid: list[Question] = []
    for index, raw in enumerate(raw_questions):
        if not isinstance(raw, dict):
            logger.debug("Dropping JSON question %d: not an object", index)
            continue
        try:
            valid.append(StructuredQuestion.model_validate(raw).to_question())
        except ValidationError as e:
            logger.debug("Dropping JSON question %d: %s", index, e.errors()[0]["msg"])
    return valid


def _text_field(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def parse_structured_block(
    text: str,
    config: QuizConfiguration | None = None,
    ui_language: UiLanguage = UiLanguage.EN,
) -> Quiz | None:
    """
    Try the strict JSON block parse.

    Quiz-level fields come from the block when present, then from the
    configuration, then from locale defaults. A missing, malformed or fully
    invalid block yields None so the caller can fall back to line parsing.

    Args:
        text: Raw response text
        config: Configuration the quiz was requested with, if any
        ui_language: Interface language for default labels

    Returns:
        The parsed Quiz, or None
    """
    block = find_json_block(text)
    if block is None:
        return None

    data = load_block(block)
    if data is None:
        return None

    questions = validate_questions(data["questions"])
    if not questions:
        logger.debug("JSON quiz block had no valid questions")
        return None

    header = header_from_config(config, ui_language) if config else default_header(ui_language)
    header.title = _text_field(data, "title") or header.title
    header.subject = _text_field(data, "subject") or header.subject
    header.description = _text_field(data, "description")
    header.category = _text_field(data, "category")

    block_difficulty = _text_field(data, "difficulty")
    if block_difficulty and block_difficulty.lower() in {d.value for d in Difficulty}:
        header.difficulty = Difficulty(block_difficulty.lower())

    logger.debug("Parsed %d question(s) from JSON block", len(questions))
    return build_quiz(questions, header, config, ui_language)
