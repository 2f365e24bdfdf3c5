"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the JSON file for another key-value backend later
2. Use in-memory storage for testing
3. Keep the account/expense logic decoupled from where bytes live

The interface is intentionally tiny - named slots holding strings, the
same contract a browser's localStorage offers. Structure (JSON, models)
is layered on top by SlotStore.
"""

from abc import ABC, abstractmethod
from typing import Optional

from expense_tracker.models.audit import AuditEvent


class KeyValueStore(ABC):
    """
    Abstract string-to-string store.

    Any backend (in-memory, JSON file, ...) must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read a slot.

        Args:
            key: Slot name

        Returns:
            The stored string, or None if the slot is empty
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Write a slot, replacing any previous value.

        Raises:
            StorageError: If the backend cannot persist the value
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """
        Clear a slot. Removing an empty slot is not an error.

        Raises:
            StorageError: If the backend cannot persist the change
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """The backend could not be read at all."""
    pass


class StorageWriteError(StorageError):
    """The backend could not persist a change."""
    pass
