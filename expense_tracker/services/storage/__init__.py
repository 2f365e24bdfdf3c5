"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Backends are plain string key-value stores (in-memory or a JSON file);
SlotStore layers JSON and models on top.
"""

from expense_tracker.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStore,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from expense_tracker.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryKeyValueStore,
)
from expense_tracker.services.storage.json_file import JsonFileKeyValueStore
from expense_tracker.services.storage.slots import SlotCollection, SlotStore

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "KeyValueStore",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "SlotCollection",
    "SlotStore",
]
