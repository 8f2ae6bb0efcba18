"""State definition for the generation workflow."""

from typing import Literal, TypedDict

from quiz_extractor.messages import UiLanguage
from quiz_extractor.models.quiz import ModelTier, Quiz, QuizConfiguration

OutcomeStatus = Literal["quiz", "plain", "parse_failure", "error"]


class GenerationState(TypedDict):
    """
    State passed between workflow nodes.

    Two flows share it: configuration-driven generation (``config`` set) and
    free chat (``config`` is None and ``user_input`` is the prompt).
    """

    # Input
    config: QuizConfiguration | None
    user_input: str | None
    ui_language: UiLanguage
    model_tier: ModelTier

    # Request
    prompt: str
    response: str | None

    # Outcome
    is_quiz: bool
    quiz: Quiz | None
    status: OutcomeStatus | None
    message: str | None
    error: str | None


def create_initial_state(
    config: QuizConfiguration | None = None,
    user_input: str | None = None,
    ui_language: UiLanguage = UiLanguage.EN,
    model_tier: ModelTier | None = None,
) -> GenerationState:
    """
    Create the initial workflow state.

    Args:
        config: Quiz configuration for the generation flow
        user_input: Free prompt for the chat flow
        ui_language: Interface language for messages and default labels
        model_tier: Overrides the tier; defaults to the config's tier or fast

    Returns:
        Initial GenerationState
    """
    if config is None and not (user_input and user_input.strip()):
        raise ValueError("Either a configuration or a non-empty prompt is required")

    if model_tier is None:
        model_tier = config.model_tier if config is not None else ModelTier.FAST

    return GenerationState(
        config=config,
        user_input=user_input,
        ui_language=ui_language,
        model_tier=model_tier,
        prompt="",
        response=None,
        is_quiz=False,
        quiz=None,
        status=None,
        message=None,
        error=None,
    )
