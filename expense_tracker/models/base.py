"""
Shared model plumbing.

Persisted records use camelCase keys on disk (userId, passwordHash, ...)
while Python code works with snake_case attributes.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class PersistedModel(BaseModel):
    """Base for every record written to a key-value slot."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_record(self) -> dict:
        """Dump to the JSON-compatible dict stored in a slot."""
        return self.model_dump(mode="json", by_alias=True)
