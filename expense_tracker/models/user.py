"""
Account and Session Models

CRITICAL: A User never carries a plaintext password.
Only the hex digest produced by the credential hasher is stored.

DESIGN DECISION: The Session is a snapshot, not a live view.
Its name/email are copied at login time and stay stale until the next
login; they are never synced from later changes to the User.
"""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import Field, field_validator

from expense_tracker.models.base import PersistedModel, utc_now


def normalize_email(email: str) -> str:
    """Emails are compared trimmed and lowercased."""
    return email.strip().lower()


class User(PersistedModel):
    """
    A registered account.

    Email is the unique key (case-insensitive); id is the stable reference
    used by sessions and expenses.
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique user ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Display name"
    )
    email: str = Field(
        ...,
        min_length=1,
        description="Login email, stored lowercased"
    )
    password_hash: str = Field(
        ...,
        pattern="^[0-9a-f]{64}$",
        description="Hex SHA-256 digest of the password"
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        description="When the account was registered"
    )

    @field_validator('email')
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return normalize_email(v)


class Session(PersistedModel):
    """The single "who is logged in" record."""

    user_id: UUID = Field(
        ...,
        description="Reference to the logged-in user (not owned)"
    )
    email: str = Field(
        ...,
        description="Email snapshot taken at login"
    )
    name: str = Field(
        ...,
        description="Name snapshot taken at login"
    )
    logged_in_at: datetime = Field(
        ...,
        description="When the session started"
    )

    @classmethod
    def for_user(cls, user: User) -> "Session":
        return cls(
            user_id=user.id,
            email=user.email,
            name=user.name,
            logged_in_at=utc_now(),
        )
