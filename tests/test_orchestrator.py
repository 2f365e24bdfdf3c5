"""Integration tests for the flows, wired through create_app_components."""

import asyncio
from decimal import Decimal

import pytest

from expense_tracker.config import Settings, StorageSettings, validate_all_settings
from expense_tracker.models import AuditEventType
from expense_tracker.orchestrator import RegistrationFlow, create_app_components, create_store
from expense_tracker.queries import ExpenseQuery
from expense_tracker.services.accounts import AccountStore
from expense_tracker.services.hashing import CredentialHasher
from expense_tracker.services.storage import (
    InMemoryAuditStorage,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    SlotStore,
)
from expense_tracker.validation import FormValidator

LUNCH_FORM = {"title": " Lunch ", "amount": "250", "category": "Food", "date": "2024-05-01"}


class BrokenHasher(CredentialHasher):
    async def hash(self, plaintext: str) -> str:
        raise RuntimeError("crypto backend exploded")


@pytest.fixture
def redirects():
    return []


@pytest.fixture
def app(redirects):
    return create_app_components(
        store=InMemoryKeyValueStore(),
        redirect=redirects.append,
        audit_storage=InMemoryAuditStorage(),
    )


def sign_up_and_in(app, email="asha@example.com"):
    asyncio.run(app.registration.submit("Asha", email, "secret1", "secret1"))
    outcome = asyncio.run(app.login.submit(email, "secret1"))
    return outcome.value


class TestRegistrationFlow:
    """Tests for RegistrationFlow."""

    def test_success_redirects_to_login(self, app):
        outcome = asyncio.run(app.registration.submit("Asha", "asha@example.com", "secret1", "secret1"))
        assert outcome.success is True
        assert outcome.redirect_to == "login.html"
        assert outcome.message == "Registration successful. Redirecting to login..."
        assert app.sessions.current_user() is None

    def test_validation_error_stops_before_store(self, app):
        outcome = asyncio.run(app.registration.submit("Asha", "asha@example.com", "abc", "abc"))
        assert outcome.success is False
        assert outcome.message == "Password must be at least 6 characters long."
        assert app.accounts.list_users() == []

    def test_duplicate_email(self, app):
        asyncio.run(app.registration.submit("Asha", "A@x.com", "secret1", "secret1"))
        outcome = asyncio.run(app.registration.submit("Other", "a@X.com", "secret2", "secret2"))
        assert outcome.success is False
        assert outcome.message == "Email is already registered."

    def test_unexpected_hash_failure_is_generic(self):
        """Test that hashing faults don't leak details to the user."""
        audit_storage = InMemoryAuditStorage()
        components = create_app_components(store=InMemoryKeyValueStore(), audit_storage=audit_storage)
        accounts = AccountStore(
            SlotStore(InMemoryKeyValueStore()),
            hasher=BrokenHasher(),
            audit_logger=components.audit_logger,
        )
        flow = RegistrationFlow(accounts, FormValidator(6), audit_logger=components.audit_logger)

        outcome = asyncio.run(flow.submit("Asha", "a@x.com", "secret1", "secret1"))

        assert outcome.success is False
        assert outcome.message == "Unexpected error during registration."
        assert "exploded" not in outcome.message
        event = audit_storage.get_recent_events()[0]
        assert event.event_type == AuditEventType.SYSTEM_ERROR
        assert "exploded" in event.error_message


class TestLoginFlow:
    """Tests for LoginFlow."""

    def test_login_starts_session(self, app):
        user = sign_up_and_in(app)
        assert user is not None
        assert app.sessions.current_user() == user
        assert app.sessions.require_authenticated() == user

    def test_login_redirects_to_dashboard(self, app):
        asyncio.run(app.registration.submit("Asha", "a@x.com", "secret1", "secret1"))
        outcome = asyncio.run(app.login.submit(" A@X.com ", "secret1"))
        assert outcome.redirect_to == "dashboard.html"

    def test_bad_credentials(self, app):
        asyncio.run(app.registration.submit("Asha", "a@x.com", "secret1", "secret1"))
        wrong = asyncio.run(app.login.submit("a@x.com", "nope"))
        unknown = asyncio.run(app.login.submit("b@x.com", "secret1"))
        assert wrong.message == unknown.message == "Invalid email or password."
        assert app.sessions.current_session() is None

    def test_missing_fields(self, app):
        outcome = asyncio.run(app.login.submit("", ""))
        assert outcome.message == "Please enter both email and password."

    def test_logout(self, app, redirects):
        sign_up_and_in(app)
        outcome = app.login.logout()
        assert outcome.redirect_to == "login.html"
        assert app.sessions.current_user() is None
        assert app.sessions.require_authenticated() is None
        assert redirects == ["login.html"]


class TestExpenseFormFlow:
    """Tests for ExpenseFormFlow."""

    def test_add_expense(self, app):
        user = sign_up_and_in(app)
        outcome = app.expense_form.submit(user, LUNCH_FORM)
        assert outcome.success is True
        assert outcome.message == "Expense added successfully."
        assert outcome.value.title == "Lunch"
        assert app.expenses.list_for_user(user.id) == [outcome.value]

    def test_invalid_form(self, app):
        user = sign_up_and_in(app)
        outcome = app.expense_form.submit(user, {**LUNCH_FORM, "amount": "0"})
        assert outcome.success is False
        assert outcome.message == "Amount must be a positive number greater than zero."
        assert app.expenses.list_for_user(user.id) == []

    def test_long_title_is_accepted(self, app):
        user = sign_up_and_in(app)
        outcome = app.expense_form.submit(user, {**LUNCH_FORM, "title": "t" * 201})
        assert outcome.success is True
        assert outcome.value.title == "t" * 201

    def test_edit_expense(self, app):
        user = sign_up_and_in(app)
        created = app.expense_form.submit(user, LUNCH_FORM).value
        outcome = app.expense_form.submit(user, {**LUNCH_FORM, "id": str(created.id), "amount": "300"})
        assert outcome.message == "Expense updated successfully."
        assert outcome.value.amount == Decimal("300")
        assert len(app.expenses.list_for_user(user.id)) == 1

    def test_edit_someone_elses_expense(self, app):
        owner = sign_up_and_in(app, "owner@x.com")
        created = app.expense_form.submit(owner, LUNCH_FORM).value
        intruder = sign_up_and_in(app, "intruder@x.com")

        outcome = app.expense_form.submit(intruder, {**LUNCH_FORM, "id": str(created.id), "amount": "1"})

        assert outcome.success is False
        assert outcome.message == "Expense not found."
        assert app.expenses.list_for_user(owner.id)[0].amount == Decimal("250")

    def test_delete(self, app):
        user = sign_up_and_in(app)
        created = app.expense_form.submit(user, LUNCH_FORM).value
        assert app.expense_form.delete(user, created.id).message == "Expense deleted."
        assert app.expense_form.delete(user, created.id).message == "Expense not found."

    def test_delete_prompt(self, app):
        user = sign_up_and_in(app)
        created = app.expense_form.submit(user, LUNCH_FORM).value
        assert app.expense_form.delete_prompt(created) == 'Delete expense "Lunch" of ₹250.00?'

    def test_dashboard(self, app):
        user = sign_up_and_in(app)
        app.expense_form.submit(user, LUNCH_FORM)
        app.expense_form.submit(user, {**LUNCH_FORM, "title": "Taxi", "category": "Transport", "amount": "100"})

        view = app.expense_form.dashboard(user, ExpenseQuery(category="Transport"))

        assert view.greeting == "Signed in as Asha (asha@example.com)"
        assert [e.title for e in view.expenses] == ["Taxi"]
        assert view.summary.count == 2
        assert view.summary.total == Decimal("350")


class TestWiring:
    """Tests for settings-driven construction."""

    def test_file_backend_from_env(self, monkeypatch, tmp_path):
        path = tmp_path / "tracker.json"
        monkeypatch.setenv("EXPENSE_TRACKER_STORAGE_BACKEND", "file")
        monkeypatch.setenv("EXPENSE_TRACKER_STORAGE_FILE_PATH", str(path))

        store = create_store(Settings())

        assert isinstance(store, JsonFileKeyValueStore)
        assert store.path == path

    def test_custom_slot_names(self, monkeypatch):
        monkeypatch.setenv("EXPENSE_TRACKER_STORAGE_USERS_SLOT", "people")
        store = InMemoryKeyValueStore()
        app = create_app_components(settings=Settings(), store=store)

        asyncio.run(app.registration.submit("Asha", "a@x.com", "secret1", "secret1"))

        assert store.get("people") is not None
        assert store.get("expense_tracker_users") is None

    def test_invalid_backend_rejected(self, monkeypatch):
        monkeypatch.setenv("EXPENSE_TRACKER_STORAGE_BACKEND", "postgres")
        with pytest.raises(ValueError):
            StorageSettings()

    def test_validate_all_settings(self):
        results = validate_all_settings()
        assert results["storage"] is True
        assert results["auth"] is True
        assert results["app"] is True

    def test_data_survives_restart(self, tmp_path):
        """Test that a file-backed tracker keeps users, sessions and expenses."""
        path = tmp_path / "tracker.json"
        first = create_app_components(store=JsonFileKeyValueStore(path))
        user = sign_up_and_in(first)
        first.expense_form.submit(user, LUNCH_FORM)

        second = create_app_components(store=JsonFileKeyValueStore(path))
        assert second.sessions.current_user() == user
        assert [e.title for e in second.expenses.list_for_user(user.id)] == ["Lunch"]
