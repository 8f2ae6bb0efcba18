"""Persistent chat and quiz history."""

from .history import CURRENT_KEY, LEGACY_KEY, HistoryStore, JsonFileStore, open_history

__all__ = ["CURRENT_KEY", "LEGACY_KEY", "HistoryStore", "JsonFileStore", "open_history"]
