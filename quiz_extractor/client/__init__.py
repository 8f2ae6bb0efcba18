"""Completion client for the Anthropic chat models."""

from .completion import CompletionClient, map_api_error

__all__ = ["CompletionClient", "map_api_error"]
