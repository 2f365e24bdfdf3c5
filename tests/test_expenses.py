"""Tests for the expense store."""

import json
from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from expense_tracker.models import AuditEventType, ErrorKind, ExpenseDraft, ExpenseUpdate
from expense_tracker.services.expenses import NOT_FOUND_MESSAGE

LUNCH = {"title": "Lunch", "amount": 250, "category": "Food", "date": "2024-05-01"}


@pytest.fixture
def owner():
    return uuid4()


@pytest.fixture
def intruder():
    return uuid4()


class TestCreateAndList:
    """Tests for create / list_for_user."""

    def test_create_then_list(self, expenses, owner):
        expense = expenses.create(owner, LUNCH)
        listed = expenses.list_for_user(owner)

        assert listed == [expense]
        assert expense.title == "Lunch"
        assert expense.amount == Decimal("250")
        assert expense.category.value == "Food"
        assert expense.expense_date == date(2024, 5, 1)
        assert expense.description == ""
        assert expense.user_id == owner
        assert expense.updated_at is None

    def test_create_normalizes_fields(self, expenses, owner):
        expense = expenses.create(owner, {
            "title": "  Taxi  ",
            "amount": "99.50",
            "category": "Transport",
            "date": "2024-05-02",
            "description": "  airport ",
        })
        assert expense.title == "Taxi"
        assert expense.amount == Decimal("99.50")
        assert expense.description == "airport"

    def test_create_accepts_draft(self, expenses, owner):
        draft = ExpenseDraft.model_validate(LUNCH)
        assert expenses.create(owner, draft).title == "Lunch"

    def test_ids_are_distinct(self, expenses, owner, intruder):
        ids = {
            expenses.create(owner, LUNCH).id,
            expenses.create(owner, LUNCH).id,
            expenses.create(intruder, LUNCH).id,
        }
        assert len(ids) == 3

    def test_list_is_scoped_and_ordered(self, expenses, owner, intruder):
        first = expenses.create(owner, {**LUNCH, "title": "First"})
        expenses.create(intruder, {**LUNCH, "title": "Theirs"})
        second = expenses.create(owner, {**LUNCH, "title": "Second"})

        assert expenses.list_for_user(owner) == [first, second]
        assert [e.title for e in expenses.list_for_user(intruder)] == ["Theirs"]
        assert expenses.list_for_user(uuid4()) == []

    def test_uncoercible_amount_raises(self, expenses, owner):
        with pytest.raises(ValidationError):
            expenses.create(owner, {**LUNCH, "amount": "lots"})

    def test_persisted_layout(self, expenses, owner, store):
        expense = expenses.create(owner, LUNCH)
        record = json.loads(store.get("expense_tracker_expenses"))[0]
        assert record["id"] == str(expense.id)
        assert record["userId"] == str(owner)
        assert record["date"] == "2024-05-01"

    def test_create_is_audited(self, expenses, owner, audit_storage):
        expenses.create(owner, LUNCH)
        assert audit_storage.get_recent_events()[0].event_type == AuditEventType.EXPENSE_CREATED


class TestUpdate:
    """Tests for ExpenseStore.update."""

    def test_partial_update_only_changes_amount(self, expenses, owner):
        original = expenses.create(owner, {**LUNCH, "description": "with team"})
        result = expenses.update(owner, original.id, {"amount": 300})

        assert result.success is True
        updated = result.value
        assert updated.amount == Decimal("300")
        assert updated.updated_at is not None
        assert updated.id == original.id
        assert updated.created_at == original.created_at
        for field in ("title", "category", "expense_date", "description", "user_id"):
            assert getattr(updated, field) == getattr(original, field)
        assert expenses.list_for_user(owner) == [updated]

    def test_update_renormalizes(self, expenses, owner):
        original = expenses.create(owner, LUNCH)
        updated = expenses.update(
            owner,
            str(original.id),
            ExpenseUpdate.model_validate({"title": "  Brunch ", "amount": "12.5", "date": "2024-05-03"}),
        ).value
        assert updated.title == "Brunch"
        assert updated.amount == Decimal("12.5")
        assert updated.expense_date == date(2024, 5, 3)

    def test_update_by_other_user_is_not_found(self, expenses, owner, intruder, store):
        """Test that a guessed id can't be used across users."""
        original = expenses.create(owner, LUNCH)
        before = store.get("expense_tracker_expenses")

        result = expenses.update(intruder, original.id, {"amount": 1})

        assert result.success is False
        assert result.error.kind == ErrorKind.NOT_FOUND
        assert result.message == NOT_FOUND_MESSAGE
        assert store.get("expense_tracker_expenses") == before

    def test_update_unknown_id(self, expenses, owner):
        result = expenses.update(owner, uuid4(), {"amount": 1})
        assert result.error.kind == ErrorKind.NOT_FOUND


class TestDelete:
    """Tests for ExpenseStore.delete."""

    def test_delete_removes_record(self, expenses, owner):
        keep = expenses.create(owner, {**LUNCH, "title": "Keep"})
        drop = expenses.create(owner, {**LUNCH, "title": "Drop"})

        result = expenses.delete(owner, drop.id)

        assert result.success is True
        assert expenses.list_for_user(owner) == [keep]

    def test_delete_unknown_id(self, expenses, owner):
        result = expenses.delete(owner, "no-such-id")
        assert result.success is False
        assert result.error.kind == ErrorKind.NOT_FOUND

    def test_delete_by_other_user_is_not_found(self, expenses, owner, intruder):
        original = expenses.create(owner, LUNCH)
        result = expenses.delete(intruder, original.id)
        assert result.error.kind == ErrorKind.NOT_FOUND
        assert expenses.list_for_user(owner) == [original]

    def test_delete_twice(self, expenses, owner):
        original = expenses.create(owner, LUNCH)
        assert expenses.delete(owner, original.id).success is True
        assert expenses.delete(owner, original.id).success is False


class TestGetForUser:
    """Tests for the ownership-scoped single lookup."""

    def test_owner_sees_it(self, expenses, owner):
        original = expenses.create(owner, LUNCH)
        assert expenses.get_for_user(owner, original.id) == original

    def test_other_user_does_not(self, expenses, owner, intruder):
        original = expenses.create(owner, LUNCH)
        assert expenses.get_for_user(intruder, original.id) is None


class TestMalformedExpenses:
    """Tests for recovery from a corrupt expenses slot."""

    def test_corrupt_slot_lists_empty(self, expenses, owner, store):
        store.set("expense_tracker_expenses", "not json at all")
        assert expenses.list_for_user(owner) == []

    def test_create_after_corruption(self, expenses, owner, store):
        store.set("expense_tracker_expenses", "{}")
        expense = expenses.create(owner, LUNCH)
        assert expenses.list_for_user(owner) == [expense]

    def test_unreadable_record_survives_other_users_writes(self, expenses, owner, intruder, store):
        """Test that a record hidden from reads is still on disk after create/update/delete."""
        legacy = {"id": str(uuid4()), "userId": str(intruder), "title": "Rent", "amount": "-5",
                  "category": "Bills", "date": "2024-05-01"}
        store.set("expense_tracker_expenses", json.dumps([legacy]))

        created = expenses.create(owner, LUNCH)
        expenses.update(owner, created.id, {"amount": 300})
        expenses.create(owner, {**LUNCH, "title": "Taxi"})
        expenses.delete(owner, created.id)

        stored = json.loads(store.get("expense_tracker_expenses"))
        assert [e["title"] for e in stored] == ["Taxi", "Rent"]
        assert stored[-1] == legacy


class TestLongText:
    """Tests that text fields carry no length cap."""

    def test_long_title_and_description(self, expenses, owner):
        expense = expenses.create(owner, {**LUNCH, "title": "t" * 250, "description": "d" * 5000})
        assert expenses.list_for_user(owner) == [expense]
        assert len(expense.title) == 250

    def test_long_title_update(self, expenses, owner):
        expense = expenses.create(owner, LUNCH)
        result = expenses.update(owner, expense.id, {"title": "u" * 300})
        assert result.success is True
        assert expenses.get_for_user(owner, expense.id).title == "u" * 300
