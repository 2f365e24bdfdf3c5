"""
Expense Store

CRUD over the expenses slot, which holds every user's records interleaved.

CRITICAL: Every lookup is ownership-scoped. A record is matched on id AND
user_id together, so a guessed id belonging to someone else is simply
"not found".
"""

from typing import Optional, Union
from uuid import UUID

from expense_tracker.audit import AuditLogger
from expense_tracker.models.audit import AuditEventBuilder
from expense_tracker.models.base import utc_now
from expense_tracker.models.expense import Expense, ExpenseDraft, ExpenseUpdate
from expense_tracker.models.result import ErrorKind, Result
from expense_tracker.services.storage import SlotStore


NOT_FOUND_MESSAGE = "Expense not found."

IdLike = Union[UUID, str]


class ExpenseStore:
    """
    Manages expense records scoped per user.

    Does not validate business rules (required fields, positive amounts);
    that is the caller's job. The store only normalizes: trims text,
    coerces amount to Decimal, stamps ids and timestamps.
    """

    def __init__(
        self,
        slots: SlotStore,
        audit_logger: Optional[AuditLogger] = None,
        slot: str = "expense_tracker_expenses",
    ):
        self._slots = slots
        self._audit_logger = audit_logger
        self._slot = slot

    def _log(self, event) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)

    def _all(self) -> list[Expense]:
        return self._slots.read_list(self._slot, Expense)

    @staticmethod
    def _index_of(
        expenses: list[Expense],
        user_id: IdLike,
        expense_id: IdLike,
    ) -> int:
        owner, target = str(user_id), str(expense_id)
        for index, expense in enumerate(expenses):
            if str(expense.id) == target and str(expense.user_id) == owner:
                return index
        return -1

    def list_for_user(self, user_id: IdLike) -> list[Expense]:
        """All of a user's expenses, in insertion order."""
        owner = str(user_id)
        return [e for e in self._all() if str(e.user_id) == owner]

    def get_for_user(self, user_id: IdLike, expense_id: IdLike) -> Optional[Expense]:
        expenses = self._all()
        index = self._index_of(expenses, user_id, expense_id)
        return expenses[index] if index >= 0 else None

    def create(self, user_id: IdLike, fields: Union[ExpenseDraft, dict]) -> Expense:
        """
        Persist a new expense.

        Raises:
            pydantic.ValidationError: If fields can't be coerced at all
                (e.g. a non-numeric amount)
        """
        draft = fields if isinstance(fields, ExpenseDraft) else ExpenseDraft.model_validate(fields)
        expense = Expense(user_id=user_id, **draft.model_dump())

        collection = self._slots.load_collection(self._slot, Expense)
        collection.records.append(expense)
        self._slots.write_collection(self._slot, collection)

        self._log(AuditEventBuilder.expense_created(expense.user_id, expense.id, str(expense.amount)))
        return expense

    def update(
        self,
        user_id: IdLike,
        expense_id: IdLike,
        fields: Union[ExpenseUpdate, dict],
    ) -> Result[Expense]:
        """
        Merge the provided fields over an owned expense.

        Fails with NOT_FOUND when no expense has this id for this user.
        """
        collection = self._slots.load_collection(self._slot, Expense)
        expenses = collection.records
        index = self._index_of(expenses, user_id, expense_id)
        if index < 0:
            self._log(AuditEventBuilder.expense_not_found(user_id, str(expense_id), "update"))
            return Result[Expense].fail(ErrorKind.NOT_FOUND, NOT_FOUND_MESSAGE)

        edit = fields if isinstance(fields, ExpenseUpdate) else ExpenseUpdate.model_validate(fields)
        changes = edit.changes()

        current = expenses[index]
        updated = Expense.model_validate({
            **current.model_dump(),
            **changes,
            "updated_at": utc_now(),
        })
        expenses[index] = updated
        self._slots.write_collection(self._slot, collection)

        self._log(AuditEventBuilder.expense_updated(updated.user_id, updated.id, sorted(changes)))
        return Result[Expense].ok(updated)

    def delete(self, user_id: IdLike, expense_id: IdLike) -> Result[None]:
        """Remove an owned expense. Same lookup and failure as update()."""
        collection = self._slots.load_collection(self._slot, Expense)
        expenses = collection.records
        index = self._index_of(expenses, user_id, expense_id)
        if index < 0:
            self._log(AuditEventBuilder.expense_not_found(user_id, str(expense_id), "delete"))
            return Result[None].fail(ErrorKind.NOT_FOUND, NOT_FOUND_MESSAGE)

        removed = expenses.pop(index)
        self._slots.write_collection(self._slot, collection)

        self._log(AuditEventBuilder.expense_deleted(removed.user_id, removed.id))
        return Result[None].ok()
