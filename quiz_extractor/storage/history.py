"""
History persistence.

``JsonFileStore`` is a small key-value store backed by one JSON file.
``HistoryStore`` keeps the list of chat and quiz records under ``CURRENT_KEY``;
lists written by older releases under ``LEGACY_KEY`` are still read when the
current key is absent, and every write updates both keys.
"""

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from quiz_extractor.errors import HistoryStoreError
from quiz_extractor.models.history import (
    ChatRecord,
    HistoryRecord,
    QuizRecord,
    history_record_adapter,
)
from quiz_extractor.models.quiz import QuizResults

logger = logging.getLogger(__name__)

CURRENT_KEY = "quiz_extractor_history"
LEGACY_KEY = "quiz_history"
DEFAULT_LIMIT = 50


class JsonFileStore:
    """Key-value store persisted as a single JSON object on disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable history file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring history file %s: top level is not an object", self.path)
            return {}
        return data

    def get(self, key: str) -> Any | None:
        """Return the value stored under a key, or None."""
        return self._load().get(key)

    def set_many(self, values: dict[str, Any]) -> None:
        """Write several keys in one file update."""
        data = self._load()
        data.update(values)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            raise HistoryStoreError(f"Cannot write history file {self.path}: {e}") from e

    def set(self, key: str, value: Any) -> None:
        """Write a single key."""
        self.set_many({key: value})


class HistoryStore:
    """Newest-first list of chat and quiz records, capped at ``limit`` entries."""

    def __init__(self, store: JsonFileStore, limit: int = DEFAULT_LIMIT):
        self.store = store
        self.limit = limit

    def _raw_records(self) -> list[Any]:
        raw = self.store.get(CURRENT_KEY)
        if raw is None:
            raw = self.store.get(LEGACY_KEY)
            if raw is not None:
                logger.info("Reading history from legacy key %r", LEGACY_KEY)
        if not isinstance(raw, list):
            return []
        return raw

    def load(self) -> list[HistoryRecord]:
        """All readable records in stored order; malformed ones are skipped."""
        records: list[HistoryRecord] = []
        for index, raw in enumerate(self._raw_records()):
            try:
                records.append(history_record_adapter.validate_python(raw))
            except ValidationError as e:
                logger.warning("Skipping unreadable history record %d: %s", index, e.errors()[0]["msg"])
        return records

    def save(self, records: list[HistoryRecord]) -> None:
        """Persist the most recent records (up to the limit) under both keys."""
        newest_first = sorted(records, key=lambda record: record.timestamp, reverse=True)
        payload = [
            history_record_adapter.dump_python(record, mode="json")
            for record in newest_first[: self.limit]
        ]
        self.store.set_many({CURRENT_KEY: payload, LEGACY_KEY: payload})

    def add(self, record: HistoryRecord) -> HistoryRecord:
        """Insert a new record at the front."""
        self.save([record, *self.load()])
        return record

    def upsert(self, record: HistoryRecord) -> HistoryRecord:
        """Replace the record with the same id in place, or insert it at the front."""
        records = self.load()
        for index, existing in enumerate(records):
            if existing.id == record.id:
                records[index] = record
                break
        else:
            records.insert(0, record)
        self.save(records)
        return record

    def update(self, record_id: str, change: Callable[[HistoryRecord], HistoryRecord]) -> HistoryRecord | None:
        """
        Apply a change function to one record and persist the result.

        Args:
            record_id: Id of the record to change
            change: Receives the stored record and returns the new one

        Returns:
            The updated record, or None if no record has that id
        """
        records = self.load()
        for index, existing in enumerate(records):
            if existing.id == record_id:
                records[index] = change(existing)
                self.save(records)
                return records[index]
        return None

    def delete(self, record_id: str) -> bool:
        """Remove a record; returns False if it did not exist."""
        records = self.load()
        remaining = [record for record in records if record.id != record_id]
        if len(remaining) == len(records):
            return False
        self.save(remaining)
        return True

    def get(self, record_id: str) -> HistoryRecord | None:
        """Look up a record by id."""
        for record in self.load():
            if record.id == record_id:
                return record
        return None

    def attach_results(self, record_id: str, results: QuizResults) -> QuizRecord | None:
        """Store the results of a taken quiz on its record."""

        def change(record: HistoryRecord) -> HistoryRecord:
            if not isinstance(record, QuizRecord):
                raise HistoryStoreError(f"Record {record_id} is not a quiz")
            return record.model_copy(update={"results": results})

        return self.update(record_id, change)

    def list_records(self, kind: str | None = None) -> list[HistoryRecord]:
        """Records sorted newest first, optionally only one kind ("chat" or "quiz")."""
        records = [record for record in self.load() if kind is None or record.kind == kind]
        return sorted(records, key=lambda record: record.timestamp, reverse=True)

    def search(self, query: str, kind: str | None = None) -> list[HistoryRecord]:
        """Case-insensitive title search, newest first."""
        needle = query.strip().lower()
        return [record for record in self.list_records(kind) if needle in record.title.lower()]

    def chats(self) -> list[ChatRecord]:
        """Saved chats, newest first."""
        return self.list_records("chat")

    def quizzes(self) -> list[QuizRecord]:
        """Saved quizzes, newest first."""
        return self.list_records("quiz")


def open_history(path: str | Path, limit: int = DEFAULT_LIMIT) -> HistoryStore:
    """Convenience constructor for a file-backed history store."""
    return HistoryStore(JsonFileStore(path), limit=limit)
