"""LangGraph workflow and state management."""

from .state import GenerationState, OutcomeStatus, create_initial_state
from .workflow import compile_workflow, create_generation_workflow, generate_chat_title

__all__ = [
    "GenerationState",
    "OutcomeStatus",
    "create_initial_state",
    "compile_workflow",
    "create_generation_workflow",
    "generate_chat_title",
]
