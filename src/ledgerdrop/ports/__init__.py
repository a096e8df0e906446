"""Ports - interfaces for external dependencies."""

from .documents import DocumentStorePort, StoredDocument
from .records import RecordHandle, RecordStorePort

__all__ = ["DocumentStorePort", "RecordHandle", "RecordStorePort", "StoredDocument"]
