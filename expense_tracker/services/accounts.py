"""
Account Store

Registration and credential checks over the users slot.

CRITICAL: authenticate() must not reveal whether an email is registered.
Unknown email and wrong password produce the exact same failure.
"""

from typing import Optional, Union
from uuid import UUID

from expense_tracker.audit import AuditLogger
from expense_tracker.models.audit import AuditEventBuilder
from expense_tracker.models.result import ErrorKind, Result
from expense_tracker.models.user import User, normalize_email
from expense_tracker.services.hashing import CredentialHasher
from expense_tracker.services.storage import SlotStore


DUPLICATE_EMAIL_MESSAGE = "Email is already registered."
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."


class AccountStore:
    """Manages the collection of registered users."""

    def __init__(
        self,
        slots: SlotStore,
        hasher: Optional[CredentialHasher] = None,
        audit_logger: Optional[AuditLogger] = None,
        slot: str = "expense_tracker_users",
    ):
        self._slots = slots
        self._hasher = hasher or CredentialHasher()
        self._audit_logger = audit_logger
        self._slot = slot

    def _log(self, event) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)

    def _duplicate(self, email: str) -> Result[User]:
        self._log(AuditEventBuilder.registration_rejected(email, "duplicate email"))
        return Result[User].fail(ErrorKind.DUPLICATE_EMAIL, DUPLICATE_EMAIL_MESSAGE)

    def list_users(self) -> list[User]:
        return self._slots.read_list(self._slot, User)

    def find_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup."""
        target = normalize_email(email)
        for user in self.list_users():
            if user.email == target:
                return user
        return None

    def find_by_id(self, user_id: Union[UUID, str]) -> Optional[User]:
        target = str(user_id)
        for user in self.list_users():
            if str(user.id) == target:
                return user
        return None

    async def register(self, name: str, email: str, password: str) -> Result[User]:
        """
        Create an account.

        Fails with DUPLICATE_EMAIL if the normalized email is taken.
        """
        normalized = normalize_email(email)
        if self.find_by_email(normalized):
            return self._duplicate(normalized)

        password_hash = await self._hasher.hash(password)

        user = User(
            name=name,
            email=normalized,
            password_hash=password_hash,
        )
        # Hashing yields; re-check against a fresh read before appending
        collection = self._slots.load_collection(self._slot, User)
        if any(existing.email == normalized for existing in collection.records):
            return self._duplicate(normalized)
        collection.records.append(user)
        self._slots.write_collection(self._slot, collection)

        self._log(AuditEventBuilder.user_registered(user.id, user.email))
        return Result[User].ok(user)

    async def authenticate(self, email: str, password: str) -> Result[User]:
        """
        Check credentials.

        Fails with INVALID_CREDENTIALS for both unknown email and wrong
        password. No side effects beyond the audit log.
        """
        user = self.find_by_email(email)
        if user is None or not await self._hasher.verify(password, user.password_hash):
            self._log(AuditEventBuilder.login_failed(normalize_email(email)))
            return Result[User].fail(
                ErrorKind.INVALID_CREDENTIALS,
                INVALID_CREDENTIALS_MESSAGE,
            )

        self._log(AuditEventBuilder.login_succeeded(user.id))
        return Result[User].ok(user)
