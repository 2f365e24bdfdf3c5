"""
Main Orchestrator for Expense Tracker

This module ties together all the components and defines the flows a
front end drives:
1. Registration (form → validate → register → send to login)
2. Login / logout (form → validate → authenticate → session → dashboard)
3. Expense form (form → validate → create or update) and delete
4. Dashboard (owned expenses → filter/sort → summary)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing reaches a store without passing form validation
- Every failure comes back as a message, never an exception
- Unexpected faults get a generic message; details go to the audit log only

Rendering and navigation stay with the caller; flows only say where to go
next via redirect_to.
"""

from typing import Any, Mapping, NamedTuple, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field

from expense_tracker.audit import AuditLogger
from expense_tracker.config import Settings, get_settings
from expense_tracker.models.expense import Expense
from expense_tracker.models.user import User
from expense_tracker.queries import (
    ExpenseQuery,
    ExpenseSummary,
    apply_filters,
    format_currency,
    summarize,
)
from expense_tracker.services.accounts import AccountStore
from expense_tracker.services.expenses import ExpenseStore
from expense_tracker.services.hashing import CredentialHasher
from expense_tracker.services.sessions import RedirectHook, SessionManager
from expense_tracker.services.storage import (
    AuditStorageInterface,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    SlotStore,
)
from expense_tracker.validation import FormValidator, parse_amount, parse_date


class FlowOutcome(BaseModel):
    """What a form submission produced, ready to show the user."""

    success: bool
    message: str
    redirect_to: Optional[str] = Field(
        default=None,
        description="Entry point to navigate to next, if any"
    )
    value: Optional[Any] = None


class DashboardView(BaseModel):
    """Everything the dashboard page renders."""

    greeting: str
    expenses: list[Expense]
    summary: ExpenseSummary


class RegistrationFlow:
    """
    Orchestrates account registration.

    On success the user is sent to the login page; registering does not
    log anyone in.
    """

    def __init__(
        self,
        accounts: AccountStore,
        validator: FormValidator,
        audit_logger: Optional[AuditLogger] = None,
        login_entry_point: str = "login.html",
    ):
        self._accounts = accounts
        self._validator = validator
        self._audit_logger = audit_logger
        self._login_entry_point = login_entry_point

    async def submit(
        self,
        name: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> FlowOutcome:
        validation = self._validator.validate_registration(
            name, email, password, confirm_password
        )
        if not validation.is_valid:
            return FlowOutcome(success=False, message=validation.first_error)

        try:
            result = await self._accounts.register(name.strip(), email.strip(), password)
        except Exception as e:
            if self._audit_logger:
                self._audit_logger.log_error("registration_failed", str(e))
            return FlowOutcome(success=False, message="Unexpected error during registration.")

        if not result.success:
            return FlowOutcome(success=False, message=result.message)

        return FlowOutcome(
            success=True,
            message="Registration successful. Redirecting to login...",
            redirect_to=self._login_entry_point,
            value=result.value,
        )


class LoginFlow:
    """Orchestrates login and logout."""

    def __init__(
        self,
        accounts: AccountStore,
        sessions: SessionManager,
        validator: FormValidator,
        audit_logger: Optional[AuditLogger] = None,
        dashboard_entry_point: str = "dashboard.html",
    ):
        self._accounts = accounts
        self._sessions = sessions
        self._validator = validator
        self._audit_logger = audit_logger
        self._dashboard_entry_point = dashboard_entry_point

    async def submit(self, email: str, password: str) -> FlowOutcome:
        validation = self._validator.validate_login(email, password)
        if not validation.is_valid:
            return FlowOutcome(success=False, message=validation.first_error)

        try:
            result = await self._accounts.authenticate(email.strip(), password)
        except Exception as e:
            if self._audit_logger:
                self._audit_logger.log_error("login_failed", str(e))
            return FlowOutcome(success=False, message="Unexpected error during login.")

        if not result.success:
            return FlowOutcome(success=False, message=result.message)

        self._sessions.start_session(result.value)
        return FlowOutcome(
            success=True,
            message="Login successful. Redirecting...",
            redirect_to=self._dashboard_entry_point,
            value=result.value,
        )

    def logout(self) -> FlowOutcome:
        self._sessions.end_session()
        return FlowOutcome(
            success=True,
            message="Logged out.",
            redirect_to=self._sessions.login_entry_point,
        )


class ExpenseFormFlow:
    """
    Orchestrates the dashboard's expense form, delete action and listing.

    A form carrying an "id" edits that expense; one without creates a new
    one.
    """

    def __init__(
        self,
        expenses: ExpenseStore,
        validator: FormValidator,
        currency: str = "INR",
        locale: str = "en_IN",
    ):
        self._expenses = expenses
        self._validator = validator
        self._currency = currency
        self._locale = locale

    def format_amount(self, amount: Any) -> str:
        return format_currency(amount, self._currency, locale=self._locale)

    def submit(self, user: User, form: Mapping[str, Any]) -> FlowOutcome:
        validation = self._validator.validate_expense(form)
        if not validation.is_valid:
            return FlowOutcome(success=False, message=validation.first_error)

        fields = {
            "title": form["title"],
            "amount": parse_amount(form["amount"]),
            "category": form["category"],
            "date": parse_date(form["date"]),
            "description": form.get("description") or "",
        }

        expense_id = form.get("id")
        if not expense_id:
            expense = self._expenses.create(user.id, fields)
            return FlowOutcome(
                success=True,
                message="Expense added successfully.",
                value=expense,
            )

        result = self._expenses.update(user.id, expense_id, fields)
        if not result.success:
            return FlowOutcome(success=False, message=result.message)
        return FlowOutcome(
            success=True,
            message="Expense updated successfully.",
            value=result.value,
        )

    def delete_prompt(self, expense: Expense) -> str:
        """Confirmation text shown before deleting."""
        return f'Delete expense "{expense.title}" of {self.format_amount(expense.amount)}?'

    def delete(self, user: User, expense_id: Union[UUID, str]) -> FlowOutcome:
        result = self._expenses.delete(user.id, expense_id)
        if not result.success:
            return FlowOutcome(success=False, message=result.message)
        return FlowOutcome(success=True, message="Expense deleted.")

    def dashboard(self, user: User, query: Optional[ExpenseQuery] = None) -> DashboardView:
        """
        Build the dashboard for a user.

        The summary always covers every owned expense; only the table is
        filtered.
        """
        owned = self._expenses.list_for_user(user.id)
        return DashboardView(
            greeting=f"Signed in as {user.name} ({user.email})",
            expenses=apply_filters(owned, query),
            summary=summarize(owned),
        )


class AppComponents(NamedTuple):
    accounts: AccountStore
    sessions: SessionManager
    expenses: ExpenseStore
    registration: RegistrationFlow
    login: LoginFlow
    expense_form: ExpenseFormFlow
    audit_logger: AuditLogger
    store: KeyValueStore


def create_store(settings: Settings) -> KeyValueStore:
    """Build the key-value backend named in settings."""
    storage_settings = settings.storage
    if storage_settings.backend == "file":
        return JsonFileKeyValueStore(storage_settings.file_path)
    return InMemoryKeyValueStore()


def create_app_components(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
    redirect: Optional[RedirectHook] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use; defaults to get_settings()
        store: Key-value backend; defaults to the one named in settings
        redirect: Called with the login entry point when a protected
                  view is hit without a session
        audit_storage: Optional persistent audit log

    Returns:
        AppComponents with every store and flow wired together
    """
    settings = settings or get_settings()
    storage_settings = settings.storage
    auth_settings = settings.auth
    app_settings = settings.app

    if store is None:
        store = create_store(settings)
    audit_logger = AuditLogger(audit_storage)
    slots = SlotStore(store, audit_logger)

    accounts = AccountStore(
        slots,
        hasher=CredentialHasher(),
        audit_logger=audit_logger,
        slot=storage_settings.users_slot,
    )
    sessions = SessionManager(
        slots,
        accounts,
        redirect=redirect,
        audit_logger=audit_logger,
        slot=storage_settings.session_slot,
        login_entry_point=auth_settings.login_entry_point,
    )
    expenses = ExpenseStore(
        slots,
        audit_logger=audit_logger,
        slot=storage_settings.expenses_slot,
    )

    validator = FormValidator(min_password_length=auth_settings.min_password_length)

    return AppComponents(
        accounts=accounts,
        sessions=sessions,
        expenses=expenses,
        registration=RegistrationFlow(
            accounts,
            validator,
            audit_logger=audit_logger,
            login_entry_point=auth_settings.login_entry_point,
        ),
        login=LoginFlow(
            accounts,
            sessions,
            validator,
            audit_logger=audit_logger,
            dashboard_entry_point=auth_settings.dashboard_entry_point,
        ),
        expense_form=ExpenseFormFlow(
            expenses,
            validator,
            currency=app_settings.currency,
            locale=app_settings.locale,
        ),
        audit_logger=audit_logger,
        store=store,
    )
