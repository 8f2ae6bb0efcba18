"""Cheap pre-filter deciding whether a response may contain a quiz."""

import logging
import re

logger = logging.getLogger(__name__)

QUIZ_KEYWORDS = (
    # English
    "quiz",
    "question",
    "multiple choice",
    "test",
    "exam",
    "assessment",
    "mcq",
    "correct answer",
    # Arabic
    "اختبار",
    "سؤال",
    "أسئلة",
    "اختيار متعدد",
    "امتحان",
    "تقييم",
    "الإجابة الصحيحة",
    "إجابة صحيحة",
)

# A numbered interrogative line: "3. ... ?" or "3. ... ؟"
NUMBERED_QUESTION_RE = re.compile(r"\d+\.\s*[^\n]*[?؟]")


def find_quiz_keywords(text: str) -> list[str]:
    """Return the quiz keywords present in the text (case-insensitive)."""
    lowered = text.lower()
    return [keyword for keyword in QUIZ_KEYWORDS if keyword in lowered]


def has_numbered_question(text: str) -> bool:
    """True if some line looks like a numbered question."""
    return NUMBERED_QUESTION_RE.search(text) is not None


def detect_quiz(text: str) -> bool:
    """
    Decide whether a response plausibly contains a quiz.

    Permissive; the extractor still drops anything without a complete question.

    Args:
        text: Raw response text

    Returns:
        True if a quiz keyword or a numbered question line is present
    """
    if not isinstance(text, str) or not text.strip():
        return False

    keywords = find_quiz_keywords(text)
    numbered = has_numbered_question(text)
    logger.debug("Quiz detection: keywords=%s numbered_question=%s", keywords, numbered)
    return bool(keywords) or numbered
