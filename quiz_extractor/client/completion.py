"""Completion client: one prompt in, one response text out."""

import logging
from collections.abc import Callable
from typing import Any

import anthropic
from langchain_anthropic import ChatAnthropic
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage

from quiz_extractor.config.settings import Settings, get_settings
from quiz_extractor.errors import (
    ApiError,
    AuthenticationError,
    MissingApiKeyError,
    RateLimitError,
    ServerError,
)
from quiz_extractor.models.quiz import ModelTier

logger = logging.getLogger(__name__)

PLACEHOLDER_API_KEYS = {"your_anthropic_api_key_here", "your-key-here", "changeme"}

ChatModelFactory = Callable[[str, Settings], BaseChatModel]


def has_usable_api_key(api_key: str | None) -> bool:
    """True if the key is set and is not one of the template placeholders."""
    return bool(api_key and api_key.strip() and api_key.strip() not in PLACEHOLDER_API_KEYS)


def default_chat_model_factory(model_name: str, settings: Settings) -> BaseChatModel:
    """Build the Anthropic chat model for a model name. Retries are disabled."""
    return ChatAnthropic(
        model=model_name,
        api_key=settings.anthropic_api_key,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
        max_retries=0,
    )


def map_api_error(error: Exception) -> ApiError:
    """
    Translate an Anthropic SDK error into the package's error hierarchy.

    Args:
        error: Exception raised while invoking the chat model

    Returns:
        AuthenticationError (401/403), RateLimitError (429), ServerError (5xx)
        or ApiError for everything else
    """
    status_code = getattr(error, "status_code", None)

    if isinstance(error, (anthropic.AuthenticationError, anthropic.PermissionDeniedError)):
        return AuthenticationError(str(error), status_code=status_code)
    if isinstance(error, anthropic.RateLimitError):
        return RateLimitError(str(error), status_code=status_code)
    if isinstance(error, anthropic.InternalServerError) or (status_code or 0) >= 500:
        return ServerError(str(error), status_code=status_code)
    return ApiError(str(error), status_code=status_code)


def response_text(content: Any) -> str:
    """Flatten a chat message's content (a string or a list of blocks) to text."""
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class CompletionClient:
    """
    Sends single-turn prompts to the configured model tiers.

    A model instance is created lazily per tier and reused.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        chat_model_factory: ChatModelFactory | None = None,
    ):
        self.settings = settings or get_settings()
        self._factory = chat_model_factory or default_chat_model_factory
        self._models: dict[ModelTier, BaseChatModel] = {}

    def model_name(self, tier: ModelTier) -> str:
        """Configured model name for a tier."""
        if tier == ModelTier.QUALITY:
            return self.settings.quality_model_name
        return self.settings.fast_model_name

    def _model(self, tier: ModelTier) -> BaseChatModel:
        if tier not in self._models:
            self._models[tier] = self._factory(self.model_name(tier), self.settings)
        return self._models[tier]

    def ask(self, prompt: str, tier: ModelTier = ModelTier.FAST) -> str:
        """
        Send one prompt and return the response text.

        Args:
            prompt: Prompt text
            tier: Model tier to use

        Returns:
            The model's response text

        Raises:
            MissingApiKeyError: If no usable API key is configured
            AuthenticationError: If the key is rejected
            RateLimitError: If the rate limit is exceeded
            ServerError: If the API answers with a 5xx status
            ApiError: For any other failure, including an empty response
        """
        if not has_usable_api_key(self.settings.anthropic_api_key):
            raise MissingApiKeyError("ANTHROPIC_API_KEY is not configured")

        model_name = self.model_name(tier)
        logger.debug("Sending %d-character prompt to %s", len(prompt), model_name)

        try:
            response = self._model(tier).invoke([HumanMessage(content=prompt)])
        except anthropic.APIError as e:
            mapped = map_api_error(e)
            logger.warning("Completion request to %s failed: %s", model_name, mapped)
            raise mapped from e

        text = response_text(response.content)
        if not text.strip():
            raise ApiError(f"Empty response from {model_name}")

        logger.debug("Received %d characters from %s", len(text), model_name)
        return text
