"""Tests for the generation workflow."""

from datetime import datetime

from quiz_extractor.errors import ApiError, MissingApiKeyError, RateLimitError, ServerError
from quiz_extractor.graph.state import create_initial_state
from quiz_extractor.graph.workflow import (
    compile_workflow,
    generate_chat_title,
    route_after_detect,
    route_after_request,
)
from quiz_extractor.messages import UiLanguage
from quiz_extractor.models.quiz import ModelTier, QuizConfiguration


class TestRouting:
    """Test conditional edges."""

    def test_route_after_request(self):
        """Test that errors end the run."""
        assert route_after_request({"status": "error"}) == "end"
        assert route_after_request({"status": None}) == "detect"

    def test_route_after_detect(self):
        """Test that only detected quizzes are extracted."""
        assert route_after_detect({"is_quiz": True}) == "extract"
        assert route_after_detect({"is_quiz": False}) == "reject"


class TestGenerationFlow:
    """Test configuration-driven generation."""

    def test_produces_quiz(self, sample_config, multiple_choice_response, fake_ask):
        """Test a successful generation."""
        ask = fake_ask(multiple_choice_response)
        final = compile_workflow(ask).invoke(create_initial_state(config=sample_config))

        assert final["status"] == "quiz"
        assert len(final["quiz"].questions) == 2
        assert final["quiz"].title == "Solar System Quiz"
        assert "2 questions" in final["message"]

    def test_sends_composed_prompt_with_config_tier(self, fake_ask, multiple_choice_response):
        """Test that the prompt comes from the composer and the tier from the config."""
        ask = fake_ask(multiple_choice_response)
        config = QuizConfiguration(subject="Owls", model_tier=ModelTier.QUALITY)
        compile_workflow(ask).invoke(create_initial_state(config=config))

        prompt, tier = ask.calls[0]
        assert "The quiz should be about Owls." in prompt
        assert tier == ModelTier.QUALITY

    def test_parse_failure(self, sample_config, fake_ask):
        """Test that an unparseable quiz response reports a parse failure."""
        ask = fake_ask("Here is your quiz:\n1. What is love?")
        final = compile_workflow(ask).invoke(create_initial_state(config=sample_config))

        assert final["status"] == "parse_failure"
        assert final["quiz"] is None
        assert "Failed to generate quiz" in final["message"]

    def test_detector_miss_with_config_is_parse_failure(self, sample_config, fake_ask):
        """Test that a non-quiz response to a configuration is a parse failure."""
        ask = fake_ask("I cannot help with that.")
        final = compile_workflow(ask).invoke(create_initial_state(config=sample_config))

        assert final["status"] == "parse_failure"

    def test_localised_parse_failure(self, sample_config, fake_ask):
        """Test the Arabic failure message."""
        ask = fake_ask("لا أستطيع")
        final = compile_workflow(ask).invoke(create_initial_state(config=sample_config, ui_language=UiLanguage.AR))

        assert final["message"].startswith("فشل إنشاء الاختبار")


class TestChatFlow:
    """Test free chat."""

    def test_plain_response(self, fake_ask):
        """Test that a response without a quiz is reported as plain text."""
        ask = fake_ask("Owls are nocturnal birds.")
        final = compile_workflow(ask).invoke(create_initial_state(user_input="Tell me about owls"))

        assert final["status"] == "plain"
        assert final["message"] == "Owls are nocturnal birds."
        assert ask.calls[0] == ("Tell me about owls", ModelTier.FAST)

    def test_detected_quiz_in_chat(self, fake_ask, arabic_response):
        """Test that a quiz in a chat response is extracted."""
        ask = fake_ask(arabic_response)
        final = compile_workflow(ask).invoke(create_initial_state(user_input="اختبرني", ui_language=UiLanguage.AR))

        assert final["status"] == "quiz"
        assert final["quiz"].title == "اختبار مُولد"

    def test_quiz_keyword_without_questions_is_plain(self, fake_ask):
        """Test that a detected but unparseable chat response is shown as text."""
        ask = fake_ask("A quiz is a short test.")
        final = compile_workflow(ask).invoke(create_initial_state(user_input="What is a quiz?"))

        assert final["status"] == "plain"
        assert final["message"] == "A quiz is a short test."


class TestErrors:
    """Test upstream error handling."""

    def test_rate_limit(self, sample_config, fake_ask):
        """Test that a rate limit ends the run with its message."""
        ask = fake_ask("", error=RateLimitError("slow down", status_code=429))
        final = compile_workflow(ask).invoke(create_initial_state(config=sample_config))

        assert final["status"] == "error"
        assert "Rate limit exceeded" in final["message"]
        assert final["response"] is None

    def test_distinct_messages(self, fake_ask):
        """Test that each error kind has its own message."""
        messages = set()
        for error in (
            MissingApiKeyError("missing"),
            RateLimitError("429"),
            ServerError("500"),
            ApiError("boom"),
        ):
            final = compile_workflow(fake_ask("", error=error)).invoke(create_initial_state(user_input="hi"))
            messages.add(final["message"])

        assert len(messages) == 4


class TestGenerateChatTitle:
    """Test chat title generation."""

    def test_cleans_title(self, fake_ask):
        """Test that the returned title is cleaned."""
        ask = fake_ask('"Owl Facts"\n')
        assert generate_chat_title(ask, "Tell me about owls") == "Owl Facts"
        assert ask.calls[0][1] == ModelTier.FAST

    def test_fallback_on_error(self, fake_ask):
        """Test the timestamped fallback title."""
        ask = fake_ask("", error=ApiError("boom"))
        now = datetime(2024, 1, 1, 9, 30, 0)

        assert generate_chat_title(ask, "hi", UiLanguage.EN, now=now) == "Chat 09:30:00"
        assert generate_chat_title(ask, "hi", UiLanguage.AR, now=now) == "محادثة 09:30:00"
