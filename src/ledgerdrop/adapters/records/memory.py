"""Record store adapter keeping records in memory."""

import itertools
import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ...domain.models import TransactionKind
from ...ports.records import RecordHandle, RecordStorePort

logger = logging.getLogger(__name__)

MANDATORY_BODY_FIELDS = ("entity", "subsidiary")
SOFT_MANDATORY_BODY_FIELDS = ("account", "trandate")
MANDATORY_LINE_FIELDS = ("item", "amount")


class RecordValidationError(Exception):
    """Record rejected on save."""


@dataclass
class StoredRecord:
    """A saved record."""

    id: str
    kind: TransactionKind
    fields: dict[str, Any]
    lines: dict[str, list[dict[str, Any]]] = field(default_factory=dict)


class InMemoryRecordHandle(RecordHandle):
    """Record under construction; nothing reaches the store before save()."""

    def __init__(self, store: "InMemoryRecordStore", kind: TransactionKind) -> None:
        self.store = store
        self.kind = kind
        self.fields: dict[str, Any] = {}
        self.lines: dict[str, list[dict[str, Any]]] = {}
        self._current: dict[str, dict[str, Any]] = {}

    def set_field(self, name: str, value: Any) -> None:
        self.fields[name] = value

    def add_line(self, sublist: str) -> None:
        self._current[sublist] = {}

    def set_line_field(self, sublist: str, name: str, value: Any) -> None:
        if sublist not in self._current:
            raise RecordValidationError(f"No current line on sublist {sublist}")
        self._current[sublist][name] = value

    def commit_line(self, sublist: str) -> None:
        try:
            line = self._current.pop(sublist)
        except KeyError:
            raise RecordValidationError(f"No current line on sublist {sublist}") from None
        missing = [
            name
            for name in (*MANDATORY_LINE_FIELDS, *self.store.line_fields_for(self.kind))
            if line.get(name) in (None, "")
        ]
        if missing:
            raise RecordValidationError(
                f"Please enter value(s) for: {', '.join(missing)}"
            )
        self.lines.setdefault(sublist, []).append(line)

    def save(
        self, enable_sourcing: bool = True, ignore_mandatory_fields: bool = False
    ) -> str:
        return self.store.persist(self, ignore_mandatory_fields)


class InMemoryRecordStore(RecordStorePort):
    """Thread-safe in-memory system of record.

    If known_customers is given, records for other customers are rejected.
    mandatory_line_fields lists extra line fields required per record kind.
    """

    def __init__(
        self,
        known_customers: Iterable[Any] | None = None,
        mandatory_line_fields: Mapping[TransactionKind, Iterable[str]] | None = None,
        start_id: int = 1,
    ) -> None:
        self.known_customers = (
            {str(c) for c in known_customers} if known_customers is not None else None
        )
        self.mandatory_line_fields = {
            kind: tuple(names) for kind, names in (mandatory_line_fields or {}).items()
        }
        self.records: dict[str, StoredRecord] = {}
        self._ids = itertools.count(start_id)
        self._lock = threading.Lock()

    def line_fields_for(self, kind: TransactionKind) -> tuple[str, ...]:
        return self.mandatory_line_fields.get(kind, ())

    def create_record(self, kind: TransactionKind) -> InMemoryRecordHandle:
        return InMemoryRecordHandle(self, kind)

    def persist(self, handle: InMemoryRecordHandle, ignore_mandatory_fields: bool) -> str:
        required = MANDATORY_BODY_FIELDS
        if not ignore_mandatory_fields:
            required += SOFT_MANDATORY_BODY_FIELDS
        missing = [name for name in required if handle.fields.get(name) in (None, "")]
        if missing:
            raise RecordValidationError(
                f"Please enter value(s) for: {', '.join(missing)}"
            )
        if not handle.lines.get("item"):
            raise RecordValidationError("You must enter at least one line item")

        entity = handle.fields["entity"]
        if self.known_customers is not None and str(entity) not in self.known_customers:
            raise RecordValidationError(
                f"Invalid entity reference key {entity} for subsidiary "
                f"{handle.fields['subsidiary']}"
            )

        with self._lock:
            record_id = str(next(self._ids))
            self.records[record_id] = StoredRecord(
                id=record_id,
                kind=handle.kind,
                fields=dict(handle.fields),
                lines={k: [dict(line) for line in v] for k, v in handle.lines.items()},
            )
        logger.debug(f"Saved {handle.kind.value} {record_id}")
        return record_id

    def of_kind(self, kind: TransactionKind) -> list[StoredRecord]:
        with self._lock:
            return [r for r in self.records.values() if r.kind is kind]
