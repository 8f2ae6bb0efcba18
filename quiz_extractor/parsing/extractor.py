"""Extraction entry point: detector gate, JSON fast path, then line fallback."""

import logging

from quiz_extractor.messages import UiLanguage
from quiz_extractor.models.quiz import Quiz, QuizConfiguration

from .detector import detect_quiz
from .lines import parse_lines
from .structured import parse_structured_block

logger = logging.getLogger(__name__)


def extract_quiz(
    text: str,
    config: QuizConfiguration | None = None,
    ui_language: UiLanguage = UiLanguage.EN,
) -> Quiz | None:
    """
    Recover a structured quiz from a model response.

    The first strategy that yields at least one complete question wins.
    Stateless: calling it twice on the same input gives equal results.

    Args:
        text: Raw response text
        config: Configuration the quiz was requested with, if any
        ui_language: Interface language for default labels

    Returns:
        The Quiz, or None when the text is not a quiz or nothing was recovered
    """
    if not detect_quiz(text):
        logger.debug("Detector rejected response text")
        return None

    quiz = parse_structured_block(text, config, ui_language)
    if quiz is not None:
        logger.info("Extracted %d question(s) from JSON block", len(quiz.questions))
        return quiz

    quiz = parse_lines(text, config, ui_language)
    if quiz is not None:
        logger.info("Extracted %d question(s) from text", len(quiz.questions))
    else:
        logger.info("No quiz could be extracted from response text")
    return quiz
