"""LangGraph workflow definition for quiz generation and chat."""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any, Literal

from langgraph.graph import END, StateGraph

from quiz_extractor.errors import ApiError
from quiz_extractor.messages import UiLanguage, describe_error, difficulty_label, get_message
from quiz_extractor.models.quiz import ModelTier
from quiz_extractor.parsing import detect_quiz, extract_quiz
from quiz_extractor.prompts import (
    SOURCE_TEXT_LIMIT,
    clean_title,
    compose_quiz_prompt,
    compose_title_prompt,
)

from .state import GenerationState

logger = logging.getLogger(__name__)

AskFn = Callable[[str, ModelTier], str]


def make_compose_node(max_source_chars: int = SOURCE_TEXT_LIMIT) -> Callable[[GenerationState], dict[str, Any]]:
    """Build the node that turns the input into prompt text."""

    def compose_prompt(state: GenerationState) -> dict[str, Any]:
        config = state["config"]
        if config is not None:
            prompt = compose_quiz_prompt(config, max_source_chars=max_source_chars)
        else:
            prompt = state["user_input"] or ""
        return {"prompt": prompt}

    return compose_prompt


def make_request_node(ask: AskFn) -> Callable[[GenerationState], dict[str, Any]]:
    """
    Build the node that sends the prompt through the completion callable.

    Upstream errors end the run with status "error" and a localised message.
    """

    def request_completion(state: GenerationState) -> dict[str, Any]:
        try:
            response = ask(state["prompt"], state["model_tier"])
        except ApiError as e:
            logger.warning("Completion failed: %s", e)
            return {
                "status": "error",
                "error": str(e),
                "message": describe_error(e, state["ui_language"]),
            }
        return {"response": response}

    return request_completion


def detect(state: GenerationState) -> dict[str, Any]:
    """Run the cheap quiz detector over the response."""
    return {"is_quiz": detect_quiz(state["response"] or "")}


def extract(state: GenerationState) -> dict[str, Any]:
    """Extract a quiz; report a parse failure (config flow) or plain text (chat)."""
    config = state["config"]
    ui_language = state["ui_language"]
    quiz = extract_quiz(state["response"] or "", config, ui_language)

    if quiz is not None:
        message = get_message(
            "quiz_generated",
            ui_language,
            count=len(quiz.questions),
            subject=quiz.subject,
            difficulty=difficulty_label(quiz.difficulty.value, ui_language),
        )
        return {"quiz": quiz, "status": "quiz", "message": message}

    if config is not None:
        return {"status": "parse_failure", "message": get_message("parse_failure", ui_language)}
    return {"status": "plain", "message": state["response"]}


def reject(state: GenerationState) -> dict[str, Any]:
    """The detector found no quiz in the response."""
    if state["config"] is not None:
        return {"status": "parse_failure", "message": get_message("parse_failure", state["ui_language"])}
    return {"status": "plain", "message": state["response"]}


def route_after_request(state: GenerationState) -> Literal["detect", "end"]:
    """
    Stop after a failed request, otherwise continue to detection.

    Args:
        state: Current generation state

    Returns:
        "end" if the request failed, "detect" otherwise
    """
    if state.get("status") == "error":
        return "end"
    return "detect"


def route_after_detect(state: GenerationState) -> Literal["extract", "reject"]:
    """Only detected quizzes reach the extractor."""
    return "extract" if state.get("is_quiz") else "reject"


def create_generation_workflow(ask: AskFn, max_source_chars: int = SOURCE_TEXT_LIMIT) -> StateGraph:
    """
    Create the LangGraph workflow for quiz generation and chat.

    The workflow follows this structure:
    1. Compose - Build the prompt from the configuration (or take the chat input)
    2. Request - Send it through the completion callable
    3. Detect - Cheap keyword/structure check on the response
    4. [Conditional] Extract the quiz, or reject as plain text / parse failure

    Args:
        ask: Completion callable ``(prompt, tier) -> text``
        max_source_chars: Budget for embedded document excerpts

    Returns:
        StateGraph ready to compile
    """
    workflow = StateGraph(GenerationState)

    workflow.add_node("compose", make_compose_node(max_source_chars))
    workflow.add_node("request", make_request_node(ask))
    workflow.add_node("detect", detect)
    workflow.add_node("extract", extract)
    workflow.add_node("reject", reject)

    workflow.set_entry_point("compose")
    workflow.add_edge("compose", "request")

    workflow.add_conditional_edges(
        "request",
        route_after_request,
        {
            "detect": "detect",
            "end": END,
        },
    )

    workflow.add_conditional_edges(
        "detect",
        route_after_detect,
        {
            "extract": "extract",
            "reject": "reject",
        },
    )

    workflow.add_edge("extract", END)
    workflow.add_edge("reject", END)

    return workflow


def compile_workflow(ask: AskFn, max_source_chars: int = SOURCE_TEXT_LIMIT):
    """
    Compile the workflow and return it ready for execution.

    Returns:
        Compiled workflow
    """
    workflow = create_generation_workflow(ask, max_source_chars)
    return workflow.compile()


def generate_chat_title(
    ask: AskFn,
    message: str,
    ui_language: UiLanguage = UiLanguage.EN,
    now: datetime | None = None,
) -> str:
    """
    Ask the fast tier for a short chat title.

    Falls back to a timestamped title when the request fails or comes back empty.
    """
    try:
        title = clean_title(ask(compose_title_prompt(message, ui_language), ModelTier.FAST))
    except ApiError as e:
        logger.warning("Title generation failed: %s", e)
        title = ""
    if title:
        return title
    now = now or datetime.now()
    return get_message("chat_title_fallback", ui_language, time=now.strftime("%H:%M:%S"))
