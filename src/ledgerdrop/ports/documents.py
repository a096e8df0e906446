"""Document store port - interface for the file cabinet holding batch documents."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import NamedTuple


class StoredDocument(NamedTuple):
    """Listing entry of a document store location."""

    id: str
    name: str


class DocumentStorePort(ABC):
    """Interface for a store of documents organized in named locations."""

    @abstractmethod
    def list(self, location: str) -> Iterable[StoredDocument]:
        """List documents currently present in a location."""
        pass

    @abstractmethod
    def load(self, document_id: str) -> str | bytes:
        """Return the raw content of a document.

        Decoding is left to the caller.
        """
        pass

    @abstractmethod
    def set_location(self, document_id: str, location: str) -> None:
        """Move a document to another location.

        Moving a document to the location it is already in is a no-op.
        """
        pass

    @abstractmethod
    def create(
        self, name: str, content_type: str, content: str, location: str
    ) -> str:
        """Create a new document in a location.

        Returns id of the created document.
        """
        pass
