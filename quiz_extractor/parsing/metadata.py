"""Title, subject, difficulty and time-limit resolution for parsed quizzes."""

import re
from dataclasses import dataclass

from quiz_extractor.messages import (
    QUIZ_TYPE_LABELS_AR,
    UiLanguage,
    difficulty_label,
    get_message,
)
from quiz_extractor.models.quiz import Difficulty, Question, Quiz, QuizConfiguration

MIN_DEFAULT_TIME_LIMIT_MINUTES = 5

_TITLE_RE = re.compile(r"###?\s*\*?\*?([^*\n]+(?:Quiz|Test|Assessment)[^*\n]*)\*?\*?", re.IGNORECASE)
_SUBJECT_RES = (
    re.compile(r"about[ \t]+([^,\n]+)", re.IGNORECASE),
    re.compile(r"quiz:[ \t]*([^,\n(]+)", re.IGNORECASE),
)
_DIFFICULTY_RE = re.compile(r"(easy|medium|hard|expert)\s+difficulty", re.IGNORECASE)


@dataclass
class QuizHeader:
    """Resolved quiz-level fields shared by both parse paths."""

    title: str
    subject: str
    difficulty: Difficulty
    description: str | None = None
    category: str | None = None


def default_header(ui_language: UiLanguage) -> QuizHeader:
    """Locale defaults used when nothing better is known."""
    return QuizHeader(
        title=get_message("default_title", ui_language),
        subject=get_message("default_subject", ui_language),
        difficulty=Difficulty.MEDIUM,
    )


def header_from_config(config: QuizConfiguration, ui_language: UiLanguage) -> QuizHeader:
    """
    Build the header from a configuration; config values always win.

    Args:
        config: The submitted quiz configuration
        ui_language: Interface language for the title wording

    Returns:
        Header with title, subject and difficulty taken from the config
    """
    if config.subject:
        title = get_message("subject_title", ui_language, subject=config.subject)
    elif ui_language == UiLanguage.AR:
        title = get_message(
            "subject_title", ui_language, subject=QUIZ_TYPE_LABELS_AR[config.type.value]
        )
    else:
        title = f"{config.type.value} Quiz"

    return QuizHeader(
        title=title,
        subject=config.subject or config.type.value,
        difficulty=config.difficulty,
    )


def header_from_text(text: str, ui_language: UiLanguage) -> QuizHeader:
    """Infer the header from the response text, falling back to locale defaults."""
    header = default_header(ui_language)

    title_match = _TITLE_RE.search(text)
    if title_match:
        header.title = title_match.group(1).strip()

    for pattern in _SUBJECT_RES:
        subject_match = pattern.search(text)
        if subject_match:
            header.subject = subject_match.group(1).strip()
            break

    difficulty_match = _DIFFICULTY_RE.search(text)
    if difficulty_match:
        header.difficulty = Difficulty(difficulty_match.group(1).lower())

    return header


def resolve_time_limit(config: QuizConfiguration | None, question_count: int) -> int:
    """Configured limit when positive, otherwise one minute per question (min 5)."""
    if config is not None and config.time_limit_minutes > 0:
        return config.time_limit_minutes
    return max(question_count, MIN_DEFAULT_TIME_LIMIT_MINUTES)


def build_quiz(
    questions: list[Question],
    header: QuizHeader,
    config: QuizConfiguration | None,
    ui_language: UiLanguage,
) -> Quiz:
    """
    Assemble the final Quiz from parsed questions and a resolved header.

    Args:
        questions: Complete questions, at least one
        header: Resolved title/subject/difficulty (optional description and category)
        config: Configuration the quiz was requested with, if any
        ui_language: Interface language for description and category

    Returns:
        The Quiz record
    """
    description = header.description or get_message(
        "description",
        ui_language,
        difficulty=difficulty_label(header.difficulty.value, ui_language),
        subject=header.subject,
    )
    return Quiz(
        title=header.title,
        description=description,
        subject=header.subject,
        difficulty=header.difficulty,
        category=header.category or get_message("category", ui_language),
        questions=questions,
        time_limit_minutes=resolve_time_limit(config, len(questions)),
    )
