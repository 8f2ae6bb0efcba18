"""
Prompt composer: turns a QuizConfiguration into instruction text.

The worked examples below are written in exactly the surface format the
fallback line parser reads (numbered questions, a) to d) options,
"Correct Answer: x)" and "Answer: ..."). Change them together.
"""

import logging
import re

from quiz_extractor.messages import UiLanguage
from quiz_extractor.models.quiz import Difficulty, QuizConfiguration, QuizLanguage, QuizType

logger = logging.getLogger(__name__)

SOURCE_TEXT_LIMIT = 8000

PAGE_MARKER_SPLIT_RE = re.compile(r"(?=--- Page \d+ ---)")

DIFFICULTY_GUIDANCE = {
    Difficulty.EASY: "basic concepts and fundamental knowledge",
    Difficulty.MEDIUM: "intermediate understanding and application",
    Difficulty.HARD: "advanced analysis and complex reasoning",
    Difficulty.EXPERT: "advanced analysis and complex reasoning",
}

LANGUAGE_DIRECTIVES = {
    QuizLanguage.ENGLISH: "IMPORTANT: Generate all questions and answers in English language.",
    QuizLanguage.ARABIC: (
        "IMPORTANT: Generate all questions and answers in Arabic language. "
        "Use proper Arabic grammar and vocabulary."
    ),
}

MULTIPLE_CHOICE_EXAMPLE = """1. What is the capital of France?
a) London
b) Berlin
c) Paris
d) Madrid
Correct Answer: c)

2. Which planet is closest to the Sun?
a) Venus
b) Mercury
c) Earth
d) Mars
Correct Answer: b)"""

TEXT_ANSWER_EXAMPLE = """1. What are the main causes of climate change and how do they affect global temperatures?
Answer: The main causes include greenhouse gas emissions from fossil fuels, deforestation, and industrial processes, which trap heat in the atmosphere and lead to rising global temperatures.

2. Explain the concept of photosynthesis and its importance to life on Earth.
Answer: Photosynthesis is the process by which plants convert sunlight, carbon dioxide, and water into glucose and oxygen, providing energy for plants and oxygen for other organisms."""

MIXED_EXAMPLE = """1. What is the capital of France? (Multiple Choice)
a) London
b) Berlin
c) Paris
d) Madrid
Correct Answer: c)

2. Explain the significance of the French Revolution in European history. (Text Answer)
Answer: The French Revolution (1789-1799) was a pivotal event that overthrew the monarchy, established democratic principles, and inspired revolutionary movements across Europe, fundamentally changing the political landscape.

3. Which planet is closest to the Sun? (Multiple Choice)
a) Venus
b) Mercury
c) Earth
d) Mars
Correct Answer: b)"""

_EXAMPLES = {
    QuizType.MULTIPLE_CHOICE: MULTIPLE_CHOICE_EXAMPLE,
    QuizType.TEXT_ANSWER: TEXT_ANSWER_EXAMPLE,
    QuizType.MIXED: MIXED_EXAMPLE,
}

_TYPE_INSTRUCTIONS = {
    QuizType.MULTIPLE_CHOICE: (
        "Each question must have exactly 4 options labeled a), b), c), d) with one correct answer.",
        "IMPORTANT: Format the quiz exactly like this:",
        """Make sure to:
- Number each question (1., 2., 3., etc.)
- Use a), b), c), d) for options
- Include "Correct Answer: [letter])" for each question
- End each question with a question mark""",
    ),
    QuizType.TEXT_ANSWER: (
        "Create open-ended questions that require written responses. Do NOT include multiple choice options.",
        "IMPORTANT: Format the text-answer quiz exactly like this:",
        """Make sure to:
- Number each question (1., 2., 3., etc.)
- Use "Answer: [detailed answer]" format
- Provide comprehensive answers that demonstrate understanding
- End each question with a question mark""",
    ),
    QuizType.MIXED: (
        "Mix multiple choice questions with text-answer questions. Include both types in the quiz.",
        "IMPORTANT: Format the mixed quiz exactly like this:",
        """Make sure to:
- Number each question (1., 2., 3., etc.)
- Indicate question type in parentheses
- For multiple choice: use a), b), c), d) options and "Correct Answer: [letter])"
- For text answer: use "Answer: [detailed answer]" format
- Mix the question types throughout the quiz""",
    ),
}


def worked_example(quiz_type: QuizType) -> str:
    """Return the format example embedded in prompts for a quiz type."""
    return _EXAMPLES[quiz_type]


def truncate_source_text(text: str, limit: int = SOURCE_TEXT_LIMIT) -> str:
    """
    Fit a document excerpt into ``limit`` characters without splitting pages.

    Page segments (each starting at its ``--- Page N ---`` marker) are taken
    whole and in order until the next one would overflow. If not even the
    first segment fits, the text is cut hard at ``limit``.

    Args:
        text: Extracted document text
        limit: Maximum number of characters to keep

    Returns:
        The excerpt, never longer than ``limit``
    """
    if len(text) <= limit:
        return text

    kept: list[str] = []
    length = 0
    for segment in PAGE_MARKER_SPLIT_RE.split(text):
        if not segment:
            continue
        if length + len(segment) > limit:
            break
        kept.append(segment)
        length += len(segment)

    if not kept:
        logger.debug("No whole page fits in %d characters; cutting hard", limit)
        return text[:limit]

    logger.debug("Kept %d page segment(s), %d of %d characters", len(kept), length, len(text))
    return "".join(kept)


def _document_preamble(config: QuizConfiguration, excerpt: str) -> str:
    return f"""CRITICAL INSTRUCTION: You are a STRICT quiz generator that MUST create questions EXCLUSIVELY from the provided document content. You are FORBIDDEN from using any external knowledge, general knowledge, or information not explicitly stated in the document below.

PDF DOCUMENT CONTENT:
{excerpt}

END OF DOCUMENT CONTENT

STRICT REQUIREMENTS:
1. ONLY use information that is EXPLICITLY written in the document above
2. NEVER add information from your general knowledge
3. NEVER make assumptions or inferences beyond what is directly stated
4. If a concept is mentioned but not fully explained in the document, DO NOT elaborate with external knowledge
5. Every question and answer MUST be directly traceable to specific text in the document
6. If the document lacks sufficient content for {config.question_count} questions, create fewer questions rather than inventing content

Create a {config.type.value} quiz with exactly {config.question_count} questions at {config.difficulty.value} difficulty level using ONLY the content provided above.

VERIFICATION CHECKLIST - Before finalizing each question, verify:
✓ Is this information explicitly stated in the document?
✓ Can I point to the exact text that supports this question/answer?
✓ Am I using ONLY document content without adding external knowledge?"""


def _quality_preamble(config: QuizConfiguration) -> str:
    opening = (
        f"Create a high-quality, accurate {config.type.value} quiz with exactly "
        f"{config.question_count} questions at {config.difficulty.value} difficulty level."
    )
    if config.subject:
        opening += f" The quiz should be about {config.subject}."

    return f"""{opening}

QUALITY REQUIREMENTS:
- Ensure all questions are factually accurate and well-researched
- Provide clear, unambiguous questions with precise wording
- For multiple choice questions, ensure only one answer is definitively correct
- Avoid trick questions or ambiguous phrasing
- Make sure difficulty level is appropriate: {DIFFICULTY_GUIDANCE[config.difficulty]}
- Double-check all facts and information for accuracy"""


def compose_quiz_prompt(config: QuizConfiguration, max_source_chars: int = SOURCE_TEXT_LIMIT) -> str:
    """
    Build the quiz generation prompt for a configuration.

    Sections, in order: the document or quality preamble, the language
    directive, the type instruction with its worked example, the time-limit
    hint and finally the custom instructions verbatim.

    Args:
        config: Submitted quiz configuration
        max_source_chars: Budget for the embedded document excerpt

    Returns:
        The prompt text
    """
    if config.source_text:
        excerpt = truncate_source_text(config.source_text, max_source_chars)
        sections = [_document_preamble(config, excerpt)]
    else:
        sections = [_quality_preamble(config)]

    sections.append(LANGUAGE_DIRECTIVES[config.quiz_language])

    instruction, format_header, checklist = _TYPE_INSTRUCTIONS[config.type]
    sections.append(f"{instruction}\n\n{format_header}\n\n{worked_example(config.type)}\n\n{checklist}")

    if config.time_limit_minutes > 0:
        sections.append(
            f"The quiz should be designed to be completed in approximately "
            f"{config.time_limit_minutes} minutes."
        )

    if config.custom_instructions:
        sections.append(f"Additional requirements: {config.custom_instructions}")

    return "\n\n".join(sections)


def compose_title_prompt(message: str, ui_language: UiLanguage = UiLanguage.EN) -> str:
    """Prompt asking for a short chat title in the interface language."""
    if ui_language == UiLanguage.AR:
        return (
            f'قم بإنشاء عنوان قصير ووصفي (3-5 كلمات) للمحادثة التي تبدأ بـ: "{message}". '
            "أرجع العنوان فقط، لا شيء آخر. يجب أن يكون العنوان باللغة العربية."
        )
    return (
        f'Generate a short, descriptive title (3-5 words) for a chat that starts with: "{message}". '
        "Only return the title, nothing else."
    )


def clean_title(raw: str) -> str:
    """Strip quotes and surrounding whitespace from a generated title."""
    return re.sub(r"[\"']", "", raw).strip()
