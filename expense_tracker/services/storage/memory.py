"""
In-memory storage backends.

Used by tests and by the default "memory" backend. Nothing survives the
process.
"""

from typing import Optional

from expense_tracker.models.audit import AuditEvent
from expense_tracker.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStore,
)


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed key-value store."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class InMemoryAuditStorage(AuditStorageInterface):
    """List-backed audit log."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
