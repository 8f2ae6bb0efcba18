"""Prompt construction for quiz generation and chat titles."""

from .composer import (
    SOURCE_TEXT_LIMIT,
    clean_title,
    compose_quiz_prompt,
    compose_title_prompt,
    truncate_source_text,
    worked_example,
)

__all__ = [
    "SOURCE_TEXT_LIMIT",
    "clean_title",
    "compose_quiz_prompt",
    "compose_title_prompt",
    "truncate_source_text",
    "worked_example",
]
