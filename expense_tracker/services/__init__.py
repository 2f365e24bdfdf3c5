"""
Services package.

Storage backends and the credential hasher are re-exported here. The
stores themselves (accounts, sessions, expenses) are imported from their
modules directly.
"""

from expense_tracker.services.hashing import CredentialHasher
from expense_tracker.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    SlotStore,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    "CredentialHasher",
    # Storage services
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "SlotStore",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
