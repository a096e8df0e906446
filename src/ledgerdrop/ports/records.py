"""Record store port - interface for creating financial records."""

from abc import ABC, abstractmethod
from typing import Any

from ..domain.models import TransactionKind


class RecordHandle(ABC):
    """An editable record that is built field by field, then saved once.

    Nothing is persisted before save() returns.
    """

    @abstractmethod
    def set_field(self, name: str, value: Any) -> None:
        pass

    @abstractmethod
    def add_line(self, sublist: str) -> None:
        """Start a new line on a sublist."""
        pass

    @abstractmethod
    def set_line_field(self, sublist: str, name: str, value: Any) -> None:
        """Set a field on the current line of a sublist."""
        pass

    @abstractmethod
    def commit_line(self, sublist: str) -> None:
        pass

    @abstractmethod
    def save(
        self, enable_sourcing: bool = True, ignore_mandatory_fields: bool = False
    ) -> str:
        """Persist the record.

        Returns id of the new record.
        """
        pass


class RecordStorePort(ABC):
    """Interface for the system of record holding invoices and credit memos."""

    @abstractmethod
    def create_record(self, kind: TransactionKind) -> RecordHandle:
        """Create a new, unsaved record of the given kind."""
        pass

    def close(self) -> None:
        """Release connections held by the store."""
        pass
