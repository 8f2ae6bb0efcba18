"""Localised label and message tables (English/Arabic)."""

from enum import Enum
from typing import Any

from quiz_extractor.errors import (
    AuthenticationError,
    DocumentExtractionError,
    MissingApiKeyError,
    RateLimitError,
    ServerError,
)


class UiLanguage(str, Enum):
    """Interface language used for default labels and user-facing messages."""

    EN = "en"
    AR = "ar"


DIFFICULTY_LABELS_AR = {
    "easy": "سهل",
    "medium": "متوسط",
    "hard": "صعب",
    "expert": "خبير",
}

QUIZ_TYPE_LABELS_AR = {
    "multiple-choice": "اختيار متعدد",
    "text-answer": "إجابة نصية",
    "mixed": "مختلط",
}

MESSAGES: dict[str, dict[UiLanguage, str]] = {
    "default_title": {
        UiLanguage.EN: "Generated Quiz",
        UiLanguage.AR: "اختبار مُولد",
    },
    "default_subject": {
        UiLanguage.EN: "General Knowledge",
        UiLanguage.AR: "معرفة عامة",
    },
    "category": {
        UiLanguage.EN: "AI Generated",
        UiLanguage.AR: "مُولد بالذكاء الاصطناعي",
    },
    "subject_title": {
        UiLanguage.EN: "{subject} Quiz",
        UiLanguage.AR: "اختبار {subject}",
    },
    "description": {
        UiLanguage.EN: "AI-generated {difficulty} difficulty quiz about {subject}",
        UiLanguage.AR: "اختبار مُولد بالذكاء الاصطناعي بمستوى {difficulty} حول {subject}",
    },
    "quiz_generated": {
        UiLanguage.EN: (
            "Quiz generated successfully! {count} questions about "
            '"{subject}" at {difficulty} difficulty level.'
        ),
        UiLanguage.AR: (
            "تم إنشاء الاختبار بنجاح! {count} أسئلة حول "
            '"{subject}" بمستوى صعوبة {difficulty}.'
        ),
    },
    "parse_failure": {
        UiLanguage.EN: "Failed to generate quiz. Please try again with different settings.",
        UiLanguage.AR: "فشل إنشاء الاختبار. يرجى المحاولة مرة أخرى بإعدادات مختلفة.",
    },
    "error_api_key": {
        UiLanguage.EN: (
            "API key not configured. Please add your Anthropic API key to the "
            ".env file and try again."
        ),
        UiLanguage.AR: "لم يتم إعداد مفتاح API. يرجى إضافة مفتاح Anthropic إلى ملف .env ثم المحاولة مرة أخرى.",
    },
    "error_auth": {
        UiLanguage.EN: "Authentication failed. Please check your API key in the .env file.",
        UiLanguage.AR: "فشلت المصادقة. يرجى التحقق من مفتاح API في ملف .env.",
    },
    "error_rate_limit": {
        UiLanguage.EN: "Rate limit exceeded. Please wait a moment and try again.",
        UiLanguage.AR: "تم تجاوز حد الطلبات. يرجى الانتظار قليلاً ثم المحاولة مرة أخرى.",
    },
    "error_server": {
        UiLanguage.EN: "Server error. Please try again later.",
        UiLanguage.AR: "خطأ في الخادم. يرجى المحاولة لاحقاً.",
    },
    "error_document": {
        UiLanguage.EN: "Could not read the document: {detail}",
        UiLanguage.AR: "تعذرت قراءة المستند: {detail}",
    },
    "error_generic": {
        UiLanguage.EN: "Sorry, I encountered an error while processing your request: {detail}",
        UiLanguage.AR: "عذراً، حدث خطأ أثناء معالجة طلبك: {detail}",
    },
    "chat_title_fallback": {
        UiLanguage.EN: "Chat {time}",
        UiLanguage.AR: "محادثة {time}",
    },
}


def get_message(key: str, language: UiLanguage | str = UiLanguage.EN, **kwargs: Any) -> str:
    """
    Look up a localised message and fill in its placeholders.

    Args:
        key: Message key in MESSAGES
        language: Interface language; unknown values fall back to English
        **kwargs: Values for the message placeholders

    Returns:
        The formatted message
    """
    try:
        lang = UiLanguage(language)
    except ValueError:
        lang = UiLanguage.EN
    template = MESSAGES[key][lang]
    return template.format(**kwargs) if kwargs else template


def difficulty_label(difficulty: str, language: UiLanguage | str = UiLanguage.EN) -> str:
    """Return the display form of a difficulty value in the given language."""
    if UiLanguage(language) == UiLanguage.AR:
        return DIFFICULTY_LABELS_AR.get(difficulty, DIFFICULTY_LABELS_AR["medium"])
    return difficulty


def describe_error(error: Exception, language: UiLanguage | str = UiLanguage.EN) -> str:
    """Map an upstream error to its localised user-facing message."""
    if isinstance(error, MissingApiKeyError):
        return get_message("error_api_key", language)
    if isinstance(error, AuthenticationError):
        return get_message("error_auth", language)
    if isinstance(error, RateLimitError):
        return get_message("error_rate_limit", language)
    if isinstance(error, ServerError):
        return get_message("error_server", language)
    if isinstance(error, DocumentExtractionError):
        return get_message("error_document", language, detail=str(error))
    return get_message("error_generic", language, detail=str(error))
