"""
Session Manager

Tracks who is currently logged in using a single persisted session slot.

DESIGN DECISION: There is one slot, not a per-device list. Starting a
session overwrites whatever was there. A missing or unreadable session
simply means "not logged in".
"""

from typing import Callable, Optional

from expense_tracker.audit import AuditLogger
from expense_tracker.models.audit import AuditEventBuilder
from expense_tracker.models.user import Session, User
from expense_tracker.services.accounts import AccountStore
from expense_tracker.services.storage import SlotStore


RedirectHook = Callable[[str], None]


class SessionManager:
    """Gatekeeper for authenticated views."""

    def __init__(
        self,
        slots: SlotStore,
        accounts: AccountStore,
        redirect: Optional[RedirectHook] = None,
        audit_logger: Optional[AuditLogger] = None,
        slot: str = "expense_tracker_session",
        login_entry_point: str = "login.html",
    ):
        """
        Args:
            slots: Slot adapter holding the session record
            accounts: Used to resolve the session's user id
            redirect: Called with the login entry point whenever a
                      protected view is hit without a valid session
        """
        self._slots = slots
        self._accounts = accounts
        self._redirect = redirect
        self._audit_logger = audit_logger
        self._slot = slot
        self._login_entry_point = login_entry_point

    @property
    def login_entry_point(self) -> str:
        return self._login_entry_point

    def _log(self, event) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)

    def start_session(self, user: User) -> Session:
        session = Session.for_user(user)
        self._slots.write_record(self._slot, session)
        self._log(AuditEventBuilder.session_started(user.id))
        return session

    def current_session(self) -> Optional[Session]:
        return self._slots.read_record(self._slot, Session)

    def current_user(self) -> Optional[User]:
        session = self.current_session()
        if session is None:
            return None
        return self._accounts.find_by_id(session.user_id)

    def end_session(self) -> None:
        """Clear the session slot. Safe to call when nobody is logged in."""
        session = self.current_session()
        self._slots.clear(self._slot)
        self._log(AuditEventBuilder.session_ended(session.user_id if session else None))

    def require_authenticated(self) -> Optional[User]:
        """
        Resolve the current user for a protected view.

        Returns None and fires the redirect hook when nobody is logged in.
        """
        user = self.current_user()
        if user is None:
            self._log(AuditEventBuilder.auth_redirect(self._login_entry_point))
            if self._redirect:
                self._redirect(self._login_entry_point)
        return user
