"""Document store adapters."""

from .filesystem import FilesystemDocumentStore

__all__ = ["FilesystemDocumentStore"]
