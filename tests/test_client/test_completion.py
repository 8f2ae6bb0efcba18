"""Tests for the completion client."""

import anthropic
import httpx
import pytest
from langchain_core.messages import AIMessage, HumanMessage

from quiz_extractor.client.completion import CompletionClient, has_usable_api_key, map_api_error, response_text
from quiz_extractor.config.settings import Settings
from quiz_extractor.errors import (
    ApiError,
    AuthenticationError,
    MissingApiKeyError,
    RateLimitError,
    ServerError,
)
from quiz_extractor.models.quiz import ModelTier

API_URL = "https://api.anthropic.com/v1/messages"


def status_error(cls, status: int) -> anthropic.APIStatusError:
    response = httpx.Response(status, request=httpx.Request("POST", API_URL))
    return cls("request failed", response=response, body=None)


class FakeChatModel:
    """Stands in for ChatAnthropic; returns a reply or raises."""

    def __init__(self, reply=None, error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls = []

    def invoke(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.reply)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        ANTHROPIC_API_KEY="sk-test",
        FAST_MODEL_NAME="fast-model",
        QUALITY_MODEL_NAME="quality-model",
    )


def make_client(settings: Settings, model: FakeChatModel) -> tuple[CompletionClient, list[str]]:
    created: list[str] = []

    def factory(model_name: str, _settings: Settings) -> FakeChatModel:
        created.append(model_name)
        return model

    return CompletionClient(settings, chat_model_factory=factory), created


class TestAsk:
    """Test sending prompts."""

    def test_returns_text(self, settings: Settings):
        """Test a successful request."""
        model = FakeChatModel(reply="1. What? a) x")
        client, _ = make_client(settings, model)

        assert client.ask("Make a quiz") == "1. What? a) x"
        assert isinstance(model.calls[0][0], HumanMessage)
        assert model.calls[0][0].content == "Make a quiz"

    def test_tiers_map_to_models(self, settings: Settings):
        """Test that each tier uses its configured model, created once."""
        client, created = make_client(settings, FakeChatModel(reply="ok"))

        client.ask("a", ModelTier.FAST)
        client.ask("b", ModelTier.QUALITY)
        client.ask("c", ModelTier.QUALITY)

        assert created == ["fast-model", "quality-model"]

    @pytest.mark.parametrize("key", [None, "", "   ", "your_anthropic_api_key_here"])
    def test_missing_key_raises_before_request(self, key):
        """Test that no request is made without a usable key."""
        settings = Settings(ANTHROPIC_API_KEY=key)
        model = FakeChatModel(reply="never")
        client, created = make_client(settings, model)

        with pytest.raises(MissingApiKeyError):
            client.ask("hi")
        assert created == []

    def test_empty_response_is_api_error(self, settings: Settings):
        """Test that a blank reply is reported as an error."""
        client, _ = make_client(settings, FakeChatModel(reply="   "))

        with pytest.raises(ApiError):
            client.ask("hi")

    def test_block_content_is_flattened(self, settings: Settings):
        """Test list-of-blocks content."""
        reply = [{"type": "text", "text": "Hello "}, {"type": "tool_use", "id": "x"}, {"type": "text", "text": "world"}]
        client, _ = make_client(settings, FakeChatModel(reply=reply))

        assert client.ask("hi") == "Hello world"

    @pytest.mark.parametrize(
        "error,expected",
        [
            (status_error(anthropic.AuthenticationError, 401), AuthenticationError),
            (status_error(anthropic.PermissionDeniedError, 403), AuthenticationError),
            (status_error(anthropic.RateLimitError, 429), RateLimitError),
            (status_error(anthropic.InternalServerError, 500), ServerError),
            (status_error(anthropic.APIStatusError, 529), ServerError),
            (status_error(anthropic.BadRequestError, 400), ApiError),
            (anthropic.APIConnectionError(request=httpx.Request("POST", API_URL)), ApiError),
        ],
    )
    def test_sdk_errors_are_mapped(self, settings: Settings, error, expected):
        """Test the error mapping through ask."""
        client, _ = make_client(settings, FakeChatModel(error=error))

        with pytest.raises(expected) as exc_info:
            client.ask("hi")
        assert exc_info.type is expected


class TestHelpers:
    """Test module helpers."""

    def test_map_api_error_keeps_status(self):
        """Test that the status code is carried over."""
        mapped = map_api_error(status_error(anthropic.RateLimitError, 429))

        assert isinstance(mapped, RateLimitError)
        assert mapped.status_code == 429

    def test_has_usable_api_key(self):
        """Test placeholder detection."""
        assert has_usable_api_key("sk-ant-123")
        assert not has_usable_api_key("your_anthropic_api_key_here")
        assert not has_usable_api_key(None)

    def test_response_text(self):
        """Test flattening of plain and block content."""
        assert response_text("plain") == "plain"
        assert response_text(["a", {"type": "text", "text": "b"}]) == "ab"
