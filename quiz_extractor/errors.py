"""
Custom exceptions for quiz-extractor.

Parsing never raises: a response without a recoverable quiz is reported as
``None`` by the extractor. These exceptions cover the collaborators around it.
"""


class QuizExtractorError(Exception):
    """Base exception for all quiz-extractor errors."""

    pass


class ApiError(QuizExtractorError):
    """Raised when the completion API call fails for a generic reason."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class AuthenticationError(ApiError):
    """Raised when the API credential is missing or rejected."""

    pass


class MissingApiKeyError(AuthenticationError):
    """Raised before any request when no usable API key is configured."""

    pass


class RateLimitError(ApiError):
    """Raised when the completion API rate limit is exceeded."""

    pass


class ServerError(ApiError):
    """Raised when the completion API answers with a 5xx status."""

    pass


class DocumentExtractionError(QuizExtractorError):
    """Raised when text cannot be extracted from a source document."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


class HistoryStoreError(QuizExtractorError):
    """Raised when the history file cannot be written."""

    pass
