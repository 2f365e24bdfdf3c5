"""
Slot Adapter

Layers JSON and pydantic models over a raw KeyValueStore. Every store in
the system reads and writes its collection through here.

DESIGN DECISION: Malformed persisted data is recovered HERE, not in the
callers. A slot that isn't valid JSON, or has the wrong shape, reads as
empty; a list record that fails validation is hidden from callers but
kept on disk, so one bad record never costs anyone else their data. Each
recovery is logged as a warning and never raised.
"""

import json
from typing import TYPE_CHECKING, Any, Iterable, NamedTuple, Optional, TypeVar

import structlog
from pydantic import ValidationError

from expense_tracker.models.audit import AuditEventBuilder
from expense_tracker.models.base import PersistedModel
from expense_tracker.services.storage.interface import KeyValueStore

if TYPE_CHECKING:
    from expense_tracker.audit.logger import AuditLogger


ModelT = TypeVar("ModelT", bound=PersistedModel)

logger = structlog.get_logger(__name__)


class SlotCollection(NamedTuple):
    """A collection slot as read: parsed records plus raw items that failed validation."""

    records: list
    skipped: list


class SlotStore:
    """
    Typed access to named slots.

    Collections are whole-slot read-modify-write: read the full list,
    change it, write the full list back.
    """

    def __init__(
        self,
        store: KeyValueStore,
        audit_logger: Optional["AuditLogger"] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger

    @property
    def backend(self) -> KeyValueStore:
        return self._store

    def _recovered(self, slot: str, reason: str) -> None:
        if self._audit_logger:
            self._audit_logger.log(
                AuditEventBuilder.malformed_data_recovered(slot=slot, reason=reason)
            )
        else:
            logger.warning("malformed_persisted_data", slot=slot, reason=reason)

    def _load_json(self, slot: str):
        raw = self._store.get(slot)
        if raw is None or not raw.strip():
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            self._recovered(slot, f"invalid JSON: {e.msg}")
            return None

    def read_list(self, slot: str, model: type[ModelT]) -> list[ModelT]:
        """Read a collection slot. Missing or malformed means empty."""
        return self.load_collection(slot, model).records

    def load_collection(self, slot: str, model: type[ModelT]) -> SlotCollection:
        """
        Read a collection slot for a read-modify-write.

        Records that fail validation are left out of ``records`` but kept
        verbatim in ``skipped``; pass the collection back to
        write_collection() so they are written back untouched.
        """
        data = self._load_json(slot)
        if data is None:
            return SlotCollection([], [])
        if not isinstance(data, list):
            self._recovered(slot, f"expected array, got {type(data).__name__}")
            return SlotCollection([], [])

        records, skipped = [], []
        for index, item in enumerate(data):
            try:
                records.append(model.model_validate(item))
            except ValidationError as e:
                skipped.append(item)
                self._recovered(
                    slot,
                    f"record {index} skipped ({e.error_count()} validation errors)",
                )
        return SlotCollection(records, skipped)

    def write_list(
        self,
        slot: str,
        records: Iterable[PersistedModel],
        preserved: Iterable[Any] = (),
    ) -> None:
        """Write a collection slot. Preserved raw items go after the records."""
        items = [r.to_record() for r in records]
        items.extend(preserved)
        self._store.set(slot, json.dumps(items))

    def write_collection(self, slot: str, collection: SlotCollection) -> None:
        self.write_list(slot, collection.records, collection.skipped)

    def read_record(self, slot: str, model: type[ModelT]) -> Optional[ModelT]:
        """Read a single-record slot. Missing or malformed means None."""
        data = self._load_json(slot)
        if data is None:
            return None
        try:
            return model.model_validate(data)
        except ValidationError as e:
            self._recovered(slot, f"record invalid ({e.error_count()} validation errors)")
            return None

    def write_record(self, slot: str, record: PersistedModel) -> None:
        self._store.set(slot, json.dumps(record.to_record()))

    def clear(self, slot: str) -> None:
        self._store.remove(slot)
