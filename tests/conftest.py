"""Shared fixtures: every test runs against a fresh in-memory store."""

import pytest

from expense_tracker.audit import AuditLogger
from expense_tracker.services.accounts import AccountStore
from expense_tracker.services.expenses import ExpenseStore
from expense_tracker.services.hashing import CredentialHasher
from expense_tracker.services.sessions import SessionManager
from expense_tracker.services.storage import (
    InMemoryAuditStorage,
    InMemoryKeyValueStore,
    SlotStore,
)


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def slots(store, audit_logger):
    return SlotStore(store, audit_logger)


@pytest.fixture
def accounts(slots, audit_logger):
    return AccountStore(slots, hasher=CredentialHasher(), audit_logger=audit_logger)


@pytest.fixture
def redirects():
    return []


@pytest.fixture
def sessions(slots, accounts, audit_logger, redirects):
    return SessionManager(
        slots,
        accounts,
        redirect=redirects.append,
        audit_logger=audit_logger,
    )


@pytest.fixture
def expenses(slots, audit_logger):
    return ExpenseStore(slots, audit_logger=audit_logger)
