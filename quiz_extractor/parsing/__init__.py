"""Bilingual quiz detection and extraction."""

from .detector import detect_quiz
from .extractor import extract_quiz
from .letters import index_to_letter, letter_to_index
from .lines import LineKind, LineParser, parse_lines
from .structured import parse_structured_block

__all__ = [
    "LineKind",
    "LineParser",
    "detect_quiz",
    "extract_quiz",
    "index_to_letter",
    "letter_to_index",
    "parse_lines",
    "parse_structured_block",
]
