"""
Record store for Notesbot.

Three flat JSON arrays, each read whole and written back whole.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from notesbot.config import BotConfig

COLLECTIONS = ("notes", "logs", "suggestions")


def utc_timestamp() -> str:
    """Current instant as ISO 8601 UTC with milliseconds (2024-01-31T09:15:00.000Z)."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class StoredRecord(BaseModel):
    """Base for records kept in the JSON files.

    Unknown keys are preserved and missing fields read as None, so a record
    written by hand or by another tool survives a load/save cycle intact.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_record(self) -> dict[str, Any]:
        """Dump back to the stored shape, omitting fields the record never had."""
        extra = self.model_extra or {}
        present = {
            field.alias or name
            for name, field in type(self).model_fields.items()
            if name in self.model_fields_set
        }
        return {
            key: value
            for key, value in self.model_dump(by_alias=True).items()
            if value is not None or key in present or key in extra
        }


def _upper(value: str | None) -> str | None:
    return value.upper() if value is not None else None


class Note(StoredRecord):
    """A downloadable note filed under a subject."""

    subject: str | None = None
    title: str | None = None
    url: str | None = None

    @field_validator("subject")
    @classmethod
    def _upper_subject(cls, value: str | None) -> str | None:
        return _upper(value)


class UsageLogEntry(StoredRecord):
    """One /notes lookup."""

    user: str | None = None
    user_id: int | None = None
    command: str = "/notes"
    subject: str | None = None
    timestamp: str = Field(default_factory=utc_timestamp, alias="timeStamp")


class Suggestion(StoredRecord):
    """A note submitted by a student for the admin to review."""

    subject: str | None = None
    title: str | None = None
    url: str | None = None
    submitted_by: str = "Unknown"
    submitted_at: str = Field(default_factory=utc_timestamp)

    @field_validator("subject")
    @classmethod
    def _upper_subject(cls, value: str | None) -> str | None:
        return _upper(value)


class JsonStore:
    """Whole-file JSON storage for the three collections."""

    def __init__(self, config: BotConfig):
        self.config = config

    def _path(self, collection: str) -> Path:
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection}")
        return self.config.path_for(collection)

    def load(self, collection: str) -> list[dict[str, Any]]:
        """Read a collection, creating an empty file if it doesn't exist."""
        path = self._path(collection)
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("[]", encoding="utf-8")

        with open(path, encoding="utf-8") as f:
            return json.load(f)

    def save(self, collection: str, records: list[dict[str, Any]]) -> None:
        """Overwrite a collection with the given records."""
        path = self._path(collection)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2, ensure_ascii=False)

    # Notes

    def load_notes(self) -> list[Note]:
        return [Note.model_validate(record) for record in self.load("notes")]

    def save_notes(self, notes: list[Note]) -> None:
        self.save("notes", [note.to_record() for note in notes])

    def add_note(self, note: Note) -> None:
        notes = self.load_notes()
        notes.append(note)
        self.save_notes(notes)

    # Usage logs

    def append_usage(self, entry: UsageLogEntry) -> None:
        """Append a usage entry. The log is never trimmed."""
        logs = self.load("logs")
        logs.append(entry.to_record())
        self.save("logs", logs)

    def recent_usage(self, limit: int = 10) -> list[UsageLogEntry]:
        """Get the last `limit` usage entries, newest first."""
        if limit <= 0:
            return []
        logs = self.load("logs")[-limit:]
        return [UsageLogEntry.model_validate(record) for record in reversed(logs)]

    # Suggestions

    def append_suggestion(self, suggestion: Suggestion) -> None:
        suggestions = self.load("suggestions")
        suggestions.append(suggestion.to_record())
        self.save("suggestions", suggestions)

    def load_suggestions(self) -> list[Suggestion]:
        return [Suggestion.model_validate(record) for record in self.load("suggestions")]

    def get_stats(self) -> dict[str, Any]:
        """Get record counts per collection."""
        notes = self.load_notes()
        subjects = sorted({note.subject for note in notes if note.subject})

        return {
            "total_notes": len(notes),
            "subjects": subjects,
            "usage_entries": len(self.load("logs")),
            "pending_suggestions": len(self.load("suggestions")),
        }
