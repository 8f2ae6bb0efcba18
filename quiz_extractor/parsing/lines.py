"""
Fallback parser: a line-oriented state machine over loosely formatted text.

Each line is classified once into a LineKind and dispatched to a handler.
Classification follows a fixed priority order, and within every rule the Latin
patterns are tried before the Arabic ones:

    SKIP > QUESTION_START > TEXT_ANSWER > CHOICE_ANSWER > OPTION > EXPLANATION

The answer and option rules only apply while a question is open and still
unanswered, so the same line can classify differently depending on state.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum

from pydantic import ValidationError

from quiz_extractor.messages import UiLanguage
from quiz_extractor.models.quiz import (
    Question,
    QuestionKind,
    Quiz,
    QuizConfiguration,
    is_complete_question,
)

from .letters import (
    ARABIC_ANSWER_CLASS,
    ARABIC_CHOICE_CLASS,
    LATIN_ANSWER_CLASS,
    LATIN_CHOICE_CLASS,
    is_valid_choice,
    letter_to_index,
    strip_invisible,
)
from .metadata import build_quiz, header_from_config, header_from_text

logger = logging.getLogger(__name__)

# Optional "(Multiple Choice)" / "(Text Answer)" tag after a mixed-quiz question
_TYPE_TAG = r"(?:\s*\((?:multiple[\s-]choice|text[\s-]answer|اختيار متعدد|إجابة نصية)\))?"

HEADER_QUESTION_RE = re.compile(
    rf"^#{{1,4}}\s*\*{{0,2}}(\d+)\.\s*(.+?[؟?]){_TYPE_TAG}\s*\*{{0,2}}$", re.IGNORECASE
)

QUESTION_PATTERNS = (
    re.compile(rf"^(\d+)\.\s*\*{{0,2}}(.+?[؟?])\*{{0,2}}{_TYPE_TAG}\s*\*{{0,2}}$", re.IGNORECASE),
    HEADER_QUESTION_RE,
    re.compile(rf"^Q(\d+)[.:]?\s*\*{{0,2}}(.+?[؟?])\*{{0,2}}{_TYPE_TAG}\s*\*{{0,2}}$", re.IGNORECASE),
    re.compile(rf"^Question\s*(\d+)[.:]?\s*\*{{0,2}}(.+?[؟?])\*{{0,2}}{_TYPE_TAG}\s*\*{{0,2}}$", re.IGNORECASE),
    re.compile(rf"^سؤال\s*(\d+)[.:]?\s*\*{{0,2}}(.+?[؟?])\*{{0,2}}{_TYPE_TAG}\s*\*{{0,2}}$"),
    # Numbered prompt without a question mark ("2. Explain photosynthesis.")
    re.compile(rf"^(\d+)\.\s+\*{{0,2}}(.+?)\*{{0,2}}{_TYPE_TAG}\s*\*{{0,2}}$", re.IGNORECASE),
)

TEXT_ANSWER_PATTERNS = (
    re.compile(r"^\*{0,2}Answer:\*{0,2}\s*(.+)$", re.IGNORECASE),
    re.compile(r"^\*{0,2}الإجابة:\*{0,2}\s*(.+)$"),
    re.compile(r"^\*{0,2}إجابة:\*{0,2}\s*(.+)$"),
)

_L = LATIN_ANSWER_CLASS
_LA = LATIN_ANSWER_CLASS + ARABIC_ANSWER_CLASS
CHOICE_ANSWER_PATTERNS = (
    re.compile(rf"✅\s*\*{{0,2}}Correct\s+Answer:\s*\*{{0,2}}\s*([{_L}])\)", re.IGNORECASE),
    re.compile(rf"\*{{0,2}}Correct\s+Answer:\s*\*{{0,2}}\s*([{_L}])\)", re.IGNORECASE),
    re.compile(rf"Answer:\s*([{_L}])\)", re.IGNORECASE),
    re.compile(rf"Correct:\s*([{_L}])\)", re.IGNORECASE),
    re.compile(rf"✅.*?([{_L}])\)", re.IGNORECASE),
    re.compile(rf"الإجابة\s+الصحيحة:\s*\*{{0,2}}\s*([{_LA}])\)", re.IGNORECASE),
    re.compile(rf"إجابة\s+صحيحة:\s*\*{{0,2}}\s*([{_LA}])\)", re.IGNORECASE),
    re.compile(rf"الصحيحة:\s*\*{{0,2}}\s*([{_LA}])\)", re.IGNORECASE),
    re.compile(rf"الإجابة:\s*([{_LA}])\)", re.IGNORECASE),
)

OPTION_PATTERNS = (
    re.compile(rf"^([{LATIN_CHOICE_CLASS}])[.)]\s*(.+)$"),
    re.compile(rf"^\(([{LATIN_CHOICE_CLASS}])\)\s*(.+)$"),
    re.compile(rf"^[-*]\s*([{LATIN_CHOICE_CLASS}])[.)]\s*(.+)$"),
    re.compile(rf"^([{ARABIC_CHOICE_CLASS}])[.)]\s*(.+)$"),
    re.compile(rf"^\(([{ARABIC_CHOICE_CLASS}])\)\s*(.+)$"),
    re.compile(rf"^[-*]\s*([{ARABIC_CHOICE_CLASS}])[.)]\s*(.+)$"),
)

EXPLANATION_PATTERNS = (
    re.compile(r"^\*{0,2}Explanation\*{0,2}\s*:\s*\*{0,2}\s*(.+)$", re.IGNORECASE),
    re.compile(r"^\*{0,2}(?:الشرح|التفسير|التوضيح)\*{0,2}\s*:\s*\*{0,2}\s*(.+)$"),
)

BOILERPLATE_PREFIXES = ("**Instructions", "**How did you do")


class LineKind(Enum):
    """Classification of a single input line."""

    SKIP = "skip"
    QUESTION_START = "question_start"
    TEXT_ANSWER = "text_answer"
    CHOICE_ANSWER = "choice_answer"
    OPTION = "option"
    EXPLANATION = "explanation"
    UNMATCHED = "unmatched"


@dataclass(frozen=True)
class LineMatch:
    """Result of classifying a line: its kind plus the captured payload."""

    kind: LineKind
    text: str = ""
    index: int = -1


@dataclass
class DraftQuestion:
    """A question being assembled from consecutive lines."""

    text: str
    options: list[str] = field(default_factory=list)
    correct_index: int = -1
    kind: QuestionKind | None = None
    explanation: str | None = None

    def is_complete(self) -> bool:
        return is_complete_question(self.kind, self.options, self.correct_index)

    def to_question(self) -> Question:
        kind = self.kind
        if kind is None:
            kind = QuestionKind.TEXT_ANSWER if len(self.options) == 1 else QuestionKind.MULTIPLE_CHOICE
        return Question(
            text=self.text,
            kind=kind,
            options=list(self.options),
            correct_index=self.correct_index,
            explanation=self.explanation,
        )


def split_lines(text: str) -> list[str]:
    """Strip invisible characters, trim every line and drop empty ones."""
    lines = (line.strip() for line in strip_invisible(text).splitlines())
    return [line for line in lines if line]


def _first_match(patterns: tuple[re.Pattern, ...], line: str, anchored: bool = True) -> re.Match | None:
    for pattern in patterns:
        match = pattern.match(line) if anchored else pattern.search(line)
        if match:
            return match
    return None


def is_skippable(line: str) -> bool:
    """Headers, separators and instruction boilerplate carry no quiz content."""
    if line.startswith("#"):
        return HEADER_QUESTION_RE.match(line) is None
    return line == "---" or line.startswith(BOILERPLATE_PREFIXES)


class LineParser:
    """Accumulates complete questions from a stream of lines."""

    def __init__(self) -> None:
        self.questions: list[Question] = []
        self.current: DraftQuestion | None = None
        self.collecting_options = False
        self.correct_answer_found = False
        self._handlers = {
            LineKind.QUESTION_START: self._start_question,
            LineKind.TEXT_ANSWER: self._set_text_answer,
            LineKind.CHOICE_ANSWER: self._set_choice_answer,
            LineKind.OPTION: self._add_option,
            LineKind.EXPLANATION: self._set_explanation,
        }

    def classify(self, line: str) -> LineMatch:
        """
        Classify a trimmed line against the rules in priority order.

        Args:
            line: A single non-empty, trimmed line

        Returns:
            The first matching LineMatch (UNMATCHED if none applies)
        """
        if is_skippable(line):
            return LineMatch(LineKind.SKIP)

        match = _first_match(QUESTION_PATTERNS, line)
        if match:
            return LineMatch(LineKind.QUESTION_START, text=match.group(2).strip())

        current = self.current
        open_question = current is not None and not self.correct_answer_found

        if open_question:
            match = _first_match(TEXT_ANSWER_PATTERNS, line)
            if match:
                return LineMatch(LineKind.TEXT_ANSWER, text=match.group(1).strip())

        if open_question and current.options:
            match = _first_match(CHOICE_ANSWER_PATTERNS, line, anchored=False)
            if match:
                return LineMatch(LineKind.CHOICE_ANSWER, text=match.group(1), index=letter_to_index(match.group(1)))

        if open_question and self.collecting_options:
            match = _first_match(OPTION_PATTERNS, line)
            if match:
                return LineMatch(LineKind.OPTION, text=match.group(2).strip())

        if current is not None and current.explanation is None:
            match = _first_match(EXPLANATION_PATTERNS, line)
            if match:
                return LineMatch(LineKind.EXPLANATION, text=match.group(1).strip())

        return LineMatch(LineKind.UNMATCHED)

    def feed(self, line: str) -> LineKind:
        """Classify one line, apply it to the parser state and return its kind."""
        result = self.classify(line)
        handler = self._handlers.get(result.kind)
        if handler is not None:
            handler(result)
        return result.kind

    def finish(self) -> list[Question]:
        """Flush the last question and return everything collected."""
        self._push_current()
        self.current = None
        return self.questions

    def _push_current(self) -> None:
        draft = self.current
        if draft is None:
            return
        if not draft.is_complete():
            logger.debug("Discarding incomplete question: %r", draft.text)
            return
        try:
            self.questions.append(draft.to_question())
        except ValidationError as e:
            logger.debug("Discarding invalid question %r: %s", draft.text, e)

    def _start_question(self, match: LineMatch) -> None:
        self._push_current()
        self.current = DraftQuestion(text=match.text)
        self.collecting_options = True
        self.correct_answer_found = False

    def _set_text_answer(self, match: LineMatch) -> None:
        self.current.options = [match.text]
        self.current.correct_index = 0
        self.current.kind = QuestionKind.TEXT_ANSWER
        self.correct_answer_found = True
        self.collecting_options = False

    def _set_choice_answer(self, match: LineMatch) -> None:
        if not is_valid_choice(match.index):
            logger.warning(
                "Ignoring out-of-range answer letter %r for question %r",
                match.text,
                self.current.text,
            )
            return
        self.current.correct_index = match.index
        self.current.kind = QuestionKind.MULTIPLE_CHOICE
        self.correct_answer_found = True
        self.collecting_options = False

    def _add_option(self, match: LineMatch) -> None:
        self.current.options.append(match.text)

    def _set_explanation(self, match: LineMatch) -> None:
        self.current.explanation = match.text


def parse_questions(text: str) -> list[Question]:
    """Run the state machine over the text and return the complete questions."""
    parser = LineParser()
    for line in split_lines(text):
        parser.feed(line)
    return parser.finish()


def parse_lines(
    text: str,
    config: QuizConfiguration | None = None,
    ui_language: UiLanguage = UiLanguage.EN,
) -> Quiz | None:
    """
    Reconstruct a quiz from loosely formatted bilingual text.

    Never raises: empty, binary-looking or otherwise unparseable input yields
    None, which callers treat as "no quiz found".

    Args:
        text: Raw response text
        config: Configuration the quiz was requested with; its subject, type
            and difficulty take precedence over anything inferred from text
        ui_language: Interface language for default labels

    Returns:
        The parsed Quiz, or None if no complete question was recovered
    """
    if not isinstance(text, str):
        return None

    try:
        questions = parse_questions(text)
        if not questions:
            logger.debug("No complete questions found in %d characters of text", len(text))
            return None

        if config is not None:
            header = header_from_config(config, ui_language)
        else:
            header = header_from_text(text, ui_language)
        return build_quiz(questions, header, config, ui_language)
    except Exception:
        logger.exception("Unexpected error while parsing quiz text")
        return None
